# SPDX-License-Identifier: LGPL-3.0-or-later
import json
import logging

import pytest

from vsphere_provider.core.logger import TRACE, JsonFormatter, Log


@pytest.mark.unit
class TestLogLevels:
    @pytest.mark.parametrize(
        "verbose,quiet,level",
        [
            (0, 0, logging.INFO),
            (2, 0, logging.DEBUG),
            (3, 0, TRACE),
            (0, 1, logging.WARNING),
            (3, 2, logging.ERROR),
        ],
    )
    def test_level_from_flags(self, verbose, quiet, level):
        assert Log._level_from_flags(verbose, quiet) == level

    def test_setup_replaces_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = Log.setup(0, str(log_file), logger_name="vsphere_provider.test_setup")
        logger = Log.setup(0, str(log_file), logger_name="vsphere_provider.test_setup")

        assert len(logger.handlers) == 2
        Log.ok(logger, "apply complete")
        for h in logger.handlers:
            h.flush()
        assert "apply complete" in log_file.read_text(encoding="utf-8")


@pytest.mark.unit
def test_json_formatter_includes_ctx():
    rec = logging.LogRecord("vsphere_provider", logging.INFO, __file__, 10, "mounted %s", ("ds1",), None)
    rec.ctx = {"host": "esx1"}

    obj = json.loads(JsonFormatter(utc=True).format(rec))

    assert obj["msg"] == "mounted ds1"
    assert obj["level"] == "INFO"
    assert obj["ctx"] == {"host": "esx1"}


@pytest.mark.unit
def test_bound_logger_carries_ctx():
    records = []

    class Capture(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger = logging.getLogger("vsphere_provider.test_bind")
    logger.setLevel(logging.INFO)
    logger.addHandler(Capture())

    log = Log.bind(logger, address="vsphere_nas_datastore.nfs01").bind(action="create")
    Log.warn(log, "partially created")
    log.info("mounting", extra={"ctx": {"host": "esx1"}})

    assert records[0].ctx == {"address": "vsphere_nas_datastore.nfs01", "action": "create"}
    assert records[0].levelno == logging.WARNING
    assert records[1].ctx == {"address": "vsphere_nas_datastore.nfs01", "action": "create", "host": "esx1"}
