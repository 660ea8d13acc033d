from __future__ import annotations

import logging

from datastore.observers import LoggingTreeObserver
from datastore.reading_tree import ReadingTree
from logging_config import ContextualFormatter, build_logging_config
from models.records import Record


def _log_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("datastore.trace", logging.INFO, __file__, 1, "Found reading.", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extra_keys() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    line = formatter.format(_log_record(timestamp=1709564400, direction="left", unrelated="x"))

    assert line == "INFO Found reading. | timestamp=1709564400 direction=left"


def test_formatter_leaves_plain_messages_alone() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    assert formatter.format(_log_record()) == "Found reading."


def test_logging_observer_narrates_descent(caplog) -> None:
    tree = ReadingTree.create(observer=LoggingTreeObserver())

    with caplog.at_level(logging.DEBUG, logger="datastore.trace"):
        tree.insert(Record(timestamp=100, temperature=1, humidity=1))
        tree.insert(Record(timestamp=50, temperature=1, humidity=1))
        tree.search(50)

    directions = [getattr(record, "direction", None) for record in caplog.records]
    assert "left" in directions
    assert any(record.getMessage() == "Found reading." for record in caplog.records)


def test_formatter_stamps_times_in_utc() -> None:
    formatter = ContextualFormatter(fmt="%(asctime)sZ %(message)s", datefmt="%Y-%m-%dT%H:%M:%S")
    record = _log_record()
    record.created = 1709564400.0

    assert formatter.format(record) == "2024-03-04T15:00:00Z Found reading."


def test_logging_config_writes_to_stderr_and_quiets_http_clients() -> None:
    config = build_logging_config("DEBUG")

    assert config["handlers"]["default"]["stream"] == "ext://sys.stderr"
    assert config["root"]["level"] == "DEBUG"
    assert config["loggers"]["httpx"] == {"level": "WARNING"}
    assert config["formatters"]["contextual"]["extra_keys"][0] == "timestamp"
