# SPDX-License-Identifier: LGPL-3.0-or-later
# vsphere_provider/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

REDACTED = "***REDACTED***"


def _safe_int(x: Any, default: int = 1) -> int:
    try:
        return int(x)
    except Exception:
        return default


def _clamp_exit_code(code: int) -> int:
    # Exit codes are typically 0..255; keep it safe and predictable.
    if code < 0:
        return 1
    if code > 255:
        return 255
    return code


def _one_line(s: str, limit: int = 600) -> str:
    s = (s or "").strip().replace("\r", " ").replace("\n", " ")
    s = " ".join(s.split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


_SECRET_KEY_PARTS = (
    "pass",
    "password",
    "passwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "auth",
    "cookie",
    "session",
    "bearer",
    "private",
)


def _is_secret_key(k: str) -> bool:
    ks = (k or "").lower()
    return any(p in ks for p in _SECRET_KEY_PARTS)


def redact(obj: Any) -> Any:
    """Return a copy of ``obj`` with secret-looking mapping keys masked (recursively)."""
    if isinstance(obj, dict):
        return {k: (REDACTED if _is_secret_key(str(k)) else redact(v)) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [redact(x) for x in obj]
    return obj


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    # Stable order, redaction, single-line.
    parts = []
    for k in sorted(ctx.keys()):
        v = ctx.get(k)
        if _is_secret_key(str(k)):
            parts.append(f"{k}=<redacted>")
        else:
            parts.append(f"{k}={v!r}")
    return ", ".join(parts)


@dataclass(eq=False)
class ProviderError(Exception):
    """
    Base project error with:
      - stable fields for reporting/JSON
      - readable __str__ (what users see)
      - safe code handling (never crashes on int())
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.code = _clamp_exit_code(_safe_int(self.code, default=1))
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        # Some tooling inspects Exception.args directly.
        self.args = (self.msg,)

    def with_context(self, **ctx: Any) -> "ProviderError":
        self.context.update(ctx)
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        """
        Human-friendly message for CLI output/logs.
        """
        parts = [self.msg or self.__class__.__name__]

        if include_context and self.context:
            parts.append(f"[{_one_line(_format_context_compact(self.context), limit=600)}]")

        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.user_message(include_context=False, include_cause=False)

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "code": self.code,
            "message": self.msg,
            "context": redact(self.context),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _one_line(str(self.cause))}
        return d


class Fatal(ProviderError):
    """
    User-facing fatal error (exit code should be honored by top-level main()).
    """
    pass


@dataclass(eq=False)
class ConfigError(Fatal):
    """Invalid configuration: bad schema values, missing credentials, malformed import IDs."""
    code: int = 2


@dataclass(eq=False)
class VSphereError(ProviderError):
    """
    vSphere/vCenter operation failed.
    Use for pyvmomi / REST / ESXi errors.
    """
    code: int = 30


@dataclass(eq=False)
class TransportError(VSphereError):
    """
    Network-level failure talking to vSphere (connection refused, timeout, TLS).
    These are the only errors worth retrying.
    """
    code: int = 12


@dataclass(eq=False)
class ManagedObjectNotFoundError(VSphereError):
    """The server reported that a managed object reference does not exist."""
    code: int = 11
    moref: Optional[str] = None


@dataclass(eq=False)
class RestError(VSphereError):
    """vCenter REST call answered with a non-success HTTP status."""
    status: Optional[int] = None


@dataclass(eq=False)
class HostLookupError(VSphereError):
    code: int = 11


class HostnameNotFoundError(HostLookupError):
    """No host with the given hostname exists in any visible datacenter."""
    pass


class HostnameOrIDNotFoundError(HostLookupError):
    """Neither a host with that managed object ID nor one with that hostname exists."""
    pass


@dataclass(eq=False)
class AmbiguousHostnameError(HostLookupError):
    """More than one host shares the hostname across datacenters."""
    code: int = 14


@dataclass(eq=False)
class HostIdentityMissingError(ConfigError):
    """Neither host_system_id nor hostname was provided."""
    code: int = 2


def wrap_vsphere(msg: str, exc: Optional[BaseException] = None, **context: Any) -> VSphereError:
    """
    Wrap a lower-level failure, keeping its classification:
    transport and not-found errors stay what they are, only the message changes.
    """
    if isinstance(exc, TransportError):
        return TransportError(msg=f"{msg}: {exc}", cause=exc, context=context)
    if isinstance(exc, ManagedObjectNotFoundError):
        return ManagedObjectNotFoundError(msg=f"{msg}: {exc}", cause=exc, context=context, moref=exc.moref)
    if isinstance(exc, HostLookupError):
        return type(exc)(msg=f"{msg}: {exc}", cause=exc, context=context)
    detail = f": {exc}" if exc is not None else ""
    return VSphereError(msg=f"{msg}{detail}", cause=exc, context=context)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, ProviderError):
        return e.user_message(
            include_context=(verbose >= 1),
            include_cause=(verbose >= 2),
        )

    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
