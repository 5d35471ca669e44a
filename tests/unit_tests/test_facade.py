"""
Facade unit tests.

Covers the enablement pre-check, delegation to the engine, name resolution
and the end-to-end scenarios against both the fake and the real engine.
"""

from __future__ import annotations

import pytest

from unixlog import (
    FormattedMessageFactory,
    MapMessage,
    Message,
    ParameterizedMessageFactory,
    Severity,
    SimpleMessage,
    create,
    get_logger,
)
from unixlog.engine import STATUS_LOGGER_NAME
from unixlog.facade import FQCN, Logger
from unixlog.markers import Marker
from unixlog.messages import Deferred, FormattedText, PlainText, Structured

SEVERITY_METHODS = [s.name.lower() for s in Severity]


class CountingMessage(Message):
    """Message that records how often it is rendered."""

    def __init__(self) -> None:
        self.format_calls = 0

    def format(self) -> str:
        self.format_calls += 1
        return "counted"


class Widget:
    pass


class TestSeverityMethods:
    """The eight level methods"""

    def test_logger_has_one_method_per_severity(self) -> None:
        for method in SEVERITY_METHODS:
            assert callable(getattr(Logger, method))

    @pytest.mark.parametrize("method", SEVERITY_METHODS)
    def test_disabled_call_does_no_work(self, fake_engine, method) -> None:
        """A disabled level must not build payloads, render messages or call suppliers."""
        fake_engine.enabled = False
        log = create("svc", context=fake_engine)
        message = CountingMessage()
        supplier_calls = []

        def supplier() -> str:
            supplier_calls.append(1)
            return "expensive"

        marker = Marker("AUDIT")
        call = getattr(log, method)
        call("plain")
        call("template {} {}", 1, 2)
        call(message)
        call(supplier)
        call(Widget())
        call(marker, "tagged")
        call("with error", exc_info=ValueError("x"))

        assert fake_engine.entries == []
        assert message.format_calls == 0
        assert supplier_calls == []

    @pytest.mark.parametrize("severity", list(Severity))
    def test_enabled_call_forwards_exactly_once(self, fake_engine, severity) -> None:
        """Severity, payload, marker and error reach the engine unmodified."""
        log = create("svc", context=fake_engine)
        marker = Marker("AUDIT")
        error = RuntimeError("boom")

        getattr(log, severity.name.lower())("disk {} full", "/var", marker=marker, exc_info=error)

        assert len(fake_engine.entries) == 1
        entry = fake_engine.entries[0]
        assert entry.level is severity
        assert entry.payload == FormattedText("disk {} full", ("/var",))
        assert entry.marker is marker
        assert entry.exc_info is error
        assert entry.fqcn == FQCN
        assert entry.logger == "svc"

    def test_omitted_marker_and_error_are_none(self, fake_engine) -> None:
        log = create("svc", context=fake_engine)
        log.info("hello")

        entry = fake_engine.entries[0]
        assert entry.marker is None
        assert entry.exc_info is None
        assert entry.payload == PlainText("hello")

    def test_leading_marker_argument(self, fake_engine) -> None:
        log = create("svc", context=fake_engine)
        marker = Marker("SECURITY")

        log.alert(marker, "login from {}", "10.0.0.1")

        entry = fake_engine.entries[0]
        assert entry.marker is marker
        assert entry.payload == FormattedText("login from {}", ("10.0.0.1",))

    def test_message_shapes_map_to_payload_variants(self, fake_engine) -> None:
        log = create("svc", context=fake_engine)
        message = MapMessage({"disk": "/var"})
        widget = Widget()

        def supplier() -> str:
            return "late"

        log.warning(message)
        log.warning(widget)
        log.warning(supplier)

        payloads = [e.payload for e in fake_engine.entries]
        assert payloads == [Structured(message), Structured(widget), Deferred(supplier)]

    def test_trailing_exception_is_passed_as_parameter(self, fake_engine) -> None:
        """Placeholder/argument reconciliation is left to the engine."""
        log = create("svc", context=fake_engine)
        error = ValueError("bad")

        log.error("failed", error)

        entry = fake_engine.entries[0]
        assert entry.payload == FormattedText("failed", (error,))
        assert entry.exc_info is None

    def test_fields_are_forwarded(self, fake_engine) -> None:
        log = create("svc", context=fake_engine)
        log.notice("request done", request_id="r-1", status=200)
        assert fake_engine.entries[0].fields == {"request_id": "r-1", "status": 200}

    def test_fields_may_share_parameter_names(self, fake_engine) -> None:
        log = create("svc", context=fake_engine)

        log.info("checkout", message="m", level="high", payload="p", fqcn="f", event="e")
        log.log("notice", "by name", level="low")

        assert fake_engine.entries[0].fields == {
            "message": "m",
            "level": "high",
            "payload": "p",
            "fqcn": "f",
            "event": "e",
        }
        assert fake_engine.entries[0].level is Severity.INFO
        assert fake_engine.entries[1].fields == {"level": "low"}

    def test_log_and_is_enabled_accept_level_names(self, fake_engine) -> None:
        fake_engine.threshold = Severity.NOTICE
        log = create("svc", context=fake_engine)

        assert log.is_enabled("notice")
        assert not log.is_enabled(Severity.INFO)

        log.log("crit", "by name")
        log.log(Severity.INFO, "filtered")
        assert [e.level for e in fake_engine.entries] == [Severity.CRIT]


class TestEndToEnd:
    """Scenarios from the facade contract"""

    def test_three_calls_recorded_in_order(self, fake_engine) -> None:
        log = create("svc", context=fake_engine)

        log.crit("critical message")
        log.notice("notice message")
        log.debug("debug message")

        assert [e.level for e in fake_engine.entries] == [Severity.CRIT, Severity.NOTICE, Severity.DEBUG]
        assert [e.payload for e in fake_engine.entries] == [
            PlainText("critical message"),
            PlainText("notice message"),
            PlainText("debug message"),
        ]

    def test_debug_dropped_at_notice_threshold(self, fake_engine) -> None:
        fake_engine.threshold = Severity.NOTICE
        log = create("svc", context=fake_engine)

        log.debug("x")

        assert fake_engine.entries == []

    def test_real_engine_records(self, context, memory_sink) -> None:
        log = create("svc", context=context)

        log.crit("critical message")
        log.notice("notice message")
        log.debug("debug message")

        records = [r for r in memory_sink.records if r["logger"] == "svc"]
        assert [r["level"] for r in records] == ["crit", "notice", "debug"]
        assert [r["message"] for r in records] == ["critical message", "notice message", "debug message"]
        assert [r["priority"] for r in records] == [150, 300, 400]

    def test_real_engine_threshold(self, context, memory_sink) -> None:
        context.set_level(Severity.NOTICE)
        log = create("svc", context=context)

        log.debug("x")
        log.info("y")

        assert memory_sink.records == []

    def test_real_engine_deferred_supplier_not_called_when_disabled(self, context, memory_sink) -> None:
        context.set_level("WARNING")
        log = create("svc", context=context)
        calls = []

        log.debug(lambda: calls.append(1) or "dump")
        assert calls == []

        log.warning(lambda: calls.append(1) or "dump")
        assert calls == [1]
        assert memory_sink.messages() == ["dump"]

    def test_real_engine_deferred_template_receives_params(self, context, memory_sink) -> None:
        log = create("svc", context=context)

        log.info(lambda: "x {}", 5)

        assert memory_sink.messages() == ["x 5"]

    def test_real_engine_message_with_params_keeps_them(self, context, memory_sink) -> None:
        log = create("svc", context=context)

        log.error(SimpleMessage("disk check"), "/var", OSError("full"))

        record = memory_sink.records[0]
        assert record["message"] == "disk check"
        assert record["params"] == ["/var"]
        assert "OSError: full" in record["exception"]

    def test_source_points_at_caller(self, context, memory_sink) -> None:
        log = create("svc", context=context)
        log.info("where")

        source = memory_sink.records[0]["source"]
        module, function, line = source.split(":")
        assert function == "test_source_points_at_caller"
        assert not module.startswith("unixlog")
        assert int(line) > 0


class TestFactory:
    """create() name resolution and registry identity"""

    def test_explicit_name(self, fake_engine) -> None:
        assert create("svc", context=fake_engine).name == "svc"

    def test_class_name(self, fake_engine) -> None:
        assert create(Widget, context=fake_engine).name == f"{__name__}.Widget"

    def test_value_uses_its_type(self, fake_engine) -> None:
        assert create(Widget(), context=fake_engine).name == f"{__name__}.Widget"

    def test_no_target_uses_calling_module(self, fake_engine) -> None:
        assert create(context=fake_engine).name == __name__
        assert get_logger(context=fake_engine).name == __name__

    def test_same_name_shares_engine_logger(self, fake_engine) -> None:
        first = create("svc", context=fake_engine)
        second = get_logger("svc", context=fake_engine)

        assert first is not second
        assert first.engine_logger is second.engine_logger
        assert list(fake_engine.loggers) == ["svc"]

    def test_default_message_factory(self, fake_engine) -> None:
        assert create("svc", context=fake_engine).message_factory == ParameterizedMessageFactory()

    def test_mismatched_factory_warns_and_last_write_wins(self, context, memory_sink) -> None:
        create("svc", context=context)

        log = create("svc", message_factory=FormattedMessageFactory(), context=context)

        assert log.message_factory == FormattedMessageFactory()
        warnings = [r for r in memory_sink.records if r["logger"] == STATUS_LOGGER_NAME]
        assert len(warnings) == 1
        assert warnings[0]["level"] == "warning"
        assert "svc" in warnings[0]["message"]

        log.info("{0}-{0}", "x")
        assert memory_sink.messages()[-1] == "x-x"

    def test_same_factory_is_silent(self, context, memory_sink) -> None:
        create("svc", message_factory=ParameterizedMessageFactory(), context=context)
        create("svc", message_factory=ParameterizedMessageFactory(), context=context)
        assert memory_sink.records == []
