import json
import logging
import sys

import pytest

from addonmanager.core.logging import (
    clearLogContext,
    configureLogging,
    getConsoleLogHandler,
    getLogContext,
    getLogger,
    setLogContext,
)
from addonmanager.core.logging.filters import RecurringSuppressFilter
from addonmanager.core.logging.formatters import ConsoleFormatter, DevFormatter, JsonFormatter, levelTag
from addonmanager.core.logging.handlers import ConsoleLogHandler


def _record(msg, level=logging.INFO, name="addonmanager.test", args=()):
    return logging.LogRecord(name, level, __file__, 1, msg, args, None)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    savedHandlers = list(root.handlers)
    savedLevel = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in savedHandlers:
            handler.close()
    root.handlers[:] = savedHandlers
    root.setLevel(savedLevel)
    bufferHandler = getConsoleLogHandler()
    bufferHandler.filters.clear()
    bufferHandler.resize(2000)
    bufferHandler.clear()


@pytest.fixture(autouse=True)
def clean_log_context():
    clearLogContext()
    yield
    clearLogContext()


@pytest.mark.parametrize("level, tag", [
    (logging.DEBUG, "INFO"),
    (logging.INFO, "INFO"),
    (logging.WARNING, "WARN"),
    (logging.ERROR, "ERROR"),
    (logging.CRITICAL, "ERROR"),
])
def test_levelTag(level, tag):
    assert levelTag(level) == tag


def test_console_formatter_line_shape():
    line = ConsoleFormatter().format(_record("Pack '%s' was moved", logging.WARNING, args=("Faithful",)))
    timestamp, rest = line[:19], line[20:]
    assert timestamp[4] == "-" and timestamp[13] == ":"
    assert rest == "[WARN] Pack 'Faithful' was moved"


def test_console_handler_keeps_recent_lines_only():
    handler = ConsoleLogHandler(maxLines=3)
    for n in range(5):
        handler.handle(_record(f"line {n}"))

    lines = handler.snapshot()

    assert [line.split("] ", 1)[1] for line in lines] == ["line 2", "line 3", "line 4"]
    lines.clear()
    assert len(handler.snapshot()) == 3


def test_console_handler_resize_and_clear():
    handler = ConsoleLogHandler(maxLines=0)
    for n in range(10):
        handler.handle(_record(f"line {n}"))
    assert len(handler.snapshot()) == 10

    handler.resize(4)
    assert [line.split("] ", 1)[1] for line in handler.snapshot()] == ["line 6", "line 7", "line 8", "line 9"]

    handler.clear()
    assert handler.snapshot() == []


def test_dev_formatter_includes_context():
    setLogContext(world="Survival Island", packRoot="resource_packs")
    text = DevFormatter().format(_record("Scanned"))
    assert text == "INFO: [addonmanager.test] Scanned [Survival Island/resource_packs]"


def test_json_formatter_payload():
    setLogContext(world="W")
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("addonmanager.test", logging.ERROR, __file__, 1, "failed %d", (2,), sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "error"
    assert payload["msg"] == "failed 2"
    assert payload["ctx"] == {"world": "W"}
    assert payload["exc"]["type"] == "RuntimeError"
    assert payload["exc"]["message"] == "boom"


def test_log_context_merges_and_ignores_none():
    setLogContext(world="A")
    setLogContext(packRoot="behavior_packs", world=None)
    assert getLogContext() == {"world": "A", "packRoot": "behavior_packs"}
    clearLogContext()
    assert getLogContext() is None


def test_recurring_filter_suppresses_after_limit():
    clock = FakeClock()
    flt = RecurringSuppressFilter(windowSeconds=10, maxPerWindow=2, clock=clock)

    results = [flt.filter(_record("Pack 'x' was hidden.")) for _ in range(5)]

    assert results == [True, True, False, False, False]
    # A different message has its own budget
    assert flt.filter(_record("Another message")) is True


def test_recurring_filter_summarizes_when_window_closes(caplog):
    clock = FakeClock()
    flt = RecurringSuppressFilter(windowSeconds=10, maxPerWindow=1, clock=clock)
    flt.filter(_record("noisy"))
    flt.filter(_record("noisy"))
    flt.filter(_record("noisy"))

    clock.now += 11
    with caplog.at_level(logging.INFO, logger="addonmanager.test"):
        assert flt.filter(_record("noisy")) is True

    summaries = [rec for rec in caplog.records if rec.getMessage().startswith("Suppressed")]
    assert len(summaries) == 1
    assert summaries[0].getMessage() == "Suppressed 2 repeated logs: noisy"
    # The summary itself is never suppressed
    assert flt.filter(summaries[0]) is True


def test_recurring_filter_groups_by_message_template():
    flt = RecurringSuppressFilter(windowSeconds=10, maxPerWindow=2, clock=FakeClock())
    results = [flt.filter(_record("Pack '%s' was hidden.", args=(name,))) for name in ["a", "b", "c"]]
    assert results == [True, True, False]


def test_recurring_filter_keys_on_level():
    flt = RecurringSuppressFilter(windowSeconds=10, maxPerWindow=1, clock=FakeClock())
    assert flt.filter(_record("same", logging.INFO)) is True
    assert flt.filter(_record("same", logging.WARNING)) is True
    assert flt.filter(_record("same", logging.WARNING)) is False


def test_getLogger_with_side():
    assert getLogger("scanner", "addonmanager").name == "addonmanager.scanner"
    assert getLogger(" scanner ").name == "scanner"


def test_configureLogging_defaults(restore_root_logging):
    configureLogging()

    root = restore_root_logging
    assert root.level == logging.INFO
    assert getConsoleLogHandler() in root.handlers
    assert not any(isinstance(handler, logging.FileHandler) for handler in root.handlers)
    assert logging.getLogger("asyncio").propagate is False

    logging.getLogger("addonmanager.test").warning("Invalid %s directory selected", "resource_packs")
    assert getConsoleLogHandler().snapshot()[-1].endswith("[WARN] Invalid resource_packs directory selected")


def test_configureLogging_from_user_settings(restore_root_logging, isolated_settings, tmp_path):
    logFile = tmp_path / "addonmanager.log"
    isolated_settings.parent.mkdir(parents=True, exist_ok=True)
    isolated_settings.write_text(
        json.dumps({
            "debug": {
                "devModeEnabled": True,
                "logFile": str(logFile),
                "consoleBufferSize": 3,
                "suppressRecurringMessages": {"enabled": True, "maxPerWindow": 2},
            },
        }),
        encoding="utf-8",
    )

    configureLogging()

    root = restore_root_logging
    assert root.level == logging.DEBUG
    fileHandlers = [handler for handler in root.handlers if isinstance(handler, logging.FileHandler)]
    assert len(fileHandlers) == 1
    assert all(any(isinstance(flt, RecurringSuppressFilter) for flt in handler.filters) for handler in root.handlers)

    lg = logging.getLogger("addonmanager.test")
    for _ in range(4):
        lg.debug("same line")
    lg.info("other line")

    lines = getConsoleLogHandler().snapshot()
    assert len(lines) == 3
    assert [line.split("] ", 1)[1] for line in lines] == ["same line", "same line", "other line"]

    fileHandlers[0].flush()
    logged = [json.loads(line) for line in logFile.read_text(encoding="utf-8").splitlines()]
    assert logged[0]["level"] == "debug"
    assert logged[-1]["msg"] == "other line"
