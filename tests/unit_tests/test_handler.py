"""
Routing stdlib records into the facade.
"""

from __future__ import annotations

import logging
from types import SimpleNamespace

import orjson
import pytest
import structlog

from logbridge.config import LogFormat, LogLevel
from logbridge.configurators import configure_inline
from logbridge.factory import StructlogFactoryAdapter
from logbridge.handler import FacadeHandler
from logbridge.levels import EngineLevel, FacadeLevel
from logbridge.manager import LogManager
from logbridge.runtime import ORIGIN_FACADE, ORIGIN_KEY


def make_record(level: int, msg: str = "hello", name: str = "app.module", **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 10, msg, (), None)
    record.__dict__.update(extra)
    return record


class RaisingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        raise AssertionError("record rendered for a disabled facade level")


@pytest.fixture
def routed(recording_logger):
    facade = recording_logger()
    loggers: list[str] = []

    def get_logger(name: str):
        loggers.append(name)
        return facade

    handler = FacadeHandler(get_logger=get_logger)
    return SimpleNamespace(handler=handler, facade=facade, loggers=loggers)


class TestLevels:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (EngineLevel.TRACE, FacadeLevel.TRACE),
            (logging.DEBUG, FacadeLevel.DEBUG),
            (25, FacadeLevel.INFO),
            (logging.WARNING, FacadeLevel.WARN),
            (logging.ERROR, FacadeLevel.ERROR),
            (logging.CRITICAL, FacadeLevel.FATAL),
            # ALL and anything below TRACE are written at TRACE.
            (3, FacadeLevel.TRACE),
            (EngineLevel.ALL, FacadeLevel.TRACE),
        ],
    )
    def test_reconciled_level(self, routed, level: int, expected: FacadeLevel) -> None:
        routed.handler.handle(make_record(level))
        assert [w[0] for w in routed.facade.writes] == [expected]

    def test_off_records_are_dropped(self, routed) -> None:
        routed.handler.handle(make_record(EngineLevel.OFF))
        assert routed.facade.writes == []
        assert routed.loggers == []

    def test_facade_logger_named_after_the_record(self, routed) -> None:
        routed.handler.handle(make_record(logging.INFO, name="app.payments"))
        assert routed.loggers == ["app.payments"]


class TestRendering:
    def test_uses_the_handler_formatter(self, routed) -> None:
        routed.handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        routed.handler.handle(make_record(logging.WARNING, "disk %s", name="app.disk"))
        assert routed.facade.writes[0][1] == "WARNING:app.disk:disk %s"

    def test_disabled_facade_level_is_never_rendered(self, recording_logger, monkeypatch) -> None:
        handler = FacadeHandler(get_logger=lambda name: recording_logger(FacadeLevel.WARN))
        handler.setFormatter(RaisingFormatter())
        monkeypatch.setattr(handler, "handleError", lambda record: pytest.fail("rendering attempted"))

        handler.handle(make_record(logging.DEBUG))

    def test_exception_is_forwarded_separately(self, routed) -> None:
        stdlib_logger = logging.getLogger("app.routed")
        stdlib_logger.addHandler(routed.handler)
        stdlib_logger.propagate = False
        try:
            try:
                raise KeyError("sku-1")
            except KeyError:
                stdlib_logger.exception("lookup failed")
        finally:
            stdlib_logger.removeHandler(routed.handler)
            stdlib_logger.propagate = True

        [(level, message, exception)] = routed.facade.writes
        assert level == FacadeLevel.ERROR
        assert message == "lookup failed"
        assert isinstance(exception, KeyError)


class TestLoopGuard:
    def test_records_written_by_the_engine_adapter_are_skipped(self, routed) -> None:
        routed.handler.handle(make_record(logging.ERROR, **{ORIGIN_KEY: ORIGIN_FACADE}))
        assert routed.facade.writes == []

    @pytest.mark.parametrize("name", ["logbridge", "logbridge.factory"])
    def test_own_diagnostics_are_skipped(self, routed, name: str) -> None:
        routed.handler.handle(make_record(logging.ERROR, name=name))
        assert routed.facade.writes == []

    def test_similar_names_are_routed(self, routed) -> None:
        routed.handler.handle(make_record(logging.ERROR, name="logbridgeapp"))
        assert len(routed.facade.writes) == 1


class TestIntoStructlog:
    def test_stdlib_records_reach_structlog(self) -> None:
        """Third-party stdlib logging ends up in the application's structlog pipeline"""
        LogManager.set_adapter(StructlogFactoryAdapter(min_level=FacadeLevel.DEBUG))
        stdlib_logger = logging.getLogger("vendor.client")
        handler = FacadeHandler()
        stdlib_logger.addHandler(handler)
        stdlib_logger.setLevel(logging.DEBUG)
        stdlib_logger.propagate = False
        try:
            with structlog.testing.capture_logs() as logs:
                stdlib_logger.warning("retrying %s", "GET /items")
                stdlib_logger.debug("connection pool stats")
        finally:
            stdlib_logger.removeHandler(handler)
            stdlib_logger.setLevel(logging.NOTSET)
            stdlib_logger.propagate = True

        assert [(entry["log_level"], entry["event"]) for entry in logs] == [
            ("warning", "retrying GET /items"),
            ("debug", "connection pool stats"),
        ]
        assert logs[0]["logger"] == "vendor.client"

    def test_structlog_routed_to_the_engine_does_not_loop(self, capsys) -> None:
        """A root-level handler must not re-forward what the structlog facade writes back"""
        configure_inline(LogLevel.INFO, LogFormat.JSON)
        LogManager.set_adapter(StructlogFactoryAdapter())
        logging.getLogger().addHandler(FacadeHandler())

        vendor = logging.getLogger("vendor.client")
        vendor.warning("retrying %s", "GET /items")
        vendor.warning("giving up")

        lines = [orjson.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
        events = [entry["event"] for entry in lines if entry.get("logger") == "vendor.client"]
        # Each record once from the engine and once through the facade.
        assert events == ["retrying GET /items", "retrying GET /items", "giving up", "giving up"]
