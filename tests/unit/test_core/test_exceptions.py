# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for exception handling and secret redaction."""
from __future__ import annotations

import pytest
from vsphere_provider.core.exceptions import (
    ConfigError,
    Fatal,
    HostnameNotFoundError,
    ManagedObjectNotFoundError,
    ProviderError,
    TransportError,
    VSphereError,
    format_exception_for_cli,
    wrap_vsphere,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test exception class hierarchy and basic functionality."""

    def test_base_exception_creation(self):
        err = ProviderError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert err.context == {}

    def test_fatal_positional(self):
        err = Fatal(40, "state file is malformed")

        assert isinstance(err, ProviderError)
        assert err.code == 40
        assert str(err) == "state file is malformed"

    def test_default_codes(self):
        assert ConfigError(msg="x").code == 2
        assert VSphereError(msg="x").code == 30
        assert TransportError(msg="x").code == 12
        assert ManagedObjectNotFoundError(msg="x").code == 11

    def test_exit_code_is_clamped(self):
        assert ProviderError(code=999, msg="x").code == 255
        assert ProviderError(code=-3, msg="x").code == 1
        assert ProviderError(code="nope", msg="x").code == 1

    def test_multiline_message_collapsed(self):
        err = VSphereError(msg="first\n  second\r\nthird")
        assert err.msg == "first second third"


@pytest.mark.unit
class TestContextAndRedaction:
    def test_with_context_chains(self):
        err = VSphereError(msg="boom").with_context(address="vsphere_host_snmp.main", action="create")
        assert err.context == {"address": "vsphere_host_snmp.main", "action": "create"}

    def test_to_dict_redacts_secrets(self):
        err = ConfigError(msg="bad", context={"vsphere_password": "hunter2", "server": "vc01"})
        d = err.to_dict()

        assert d["type"] == "ConfigError"
        assert d["context"]["vsphere_password"] == "***REDACTED***"
        assert d["context"]["server"] == "vc01"

    def test_user_message_levels(self):
        cause = OSError("connection reset")
        err = VSphereError(msg="read failed", cause=cause, context={"host": "host-1", "token": "abc"})

        assert format_exception_for_cli(err) == "read failed"
        assert "host='host-1'" in format_exception_for_cli(err, verbose=1)
        assert "token=<redacted>" in format_exception_for_cli(err, verbose=1)
        assert "cause: OSError" in format_exception_for_cli(err, verbose=2)

    def test_plain_exception_formatting(self):
        assert format_exception_for_cli(ValueError("bad\nvalue")) == "bad value"
        assert format_exception_for_cli(ValueError(""), verbose=0) == "ValueError"


@pytest.mark.unit
class TestWrapVsphere:
    def test_keeps_transport_classification(self):
        wrapped = wrap_vsphere("error retrieving host", TransportError(msg="timed out"))
        assert isinstance(wrapped, TransportError)
        assert wrapped.msg == "error retrieving host: timed out"

    def test_keeps_not_found_moref(self):
        wrapped = wrap_vsphere("lookup", ManagedObjectNotFoundError(msg="gone", moref="host-9"))
        assert isinstance(wrapped, ManagedObjectNotFoundError)
        assert wrapped.moref == "host-9"

    def test_keeps_lookup_subclass(self):
        wrapped = wrap_vsphere("iscsi read", HostnameNotFoundError(msg="could not find host"))
        assert type(wrapped) is HostnameNotFoundError

    def test_generic(self):
        wrapped = wrap_vsphere("update failed", RuntimeError("nope"), host="esx1")
        assert type(wrapped) is VSphereError
        assert wrapped.context == {"host": "esx1"}
        assert wrapped.cause is not None
