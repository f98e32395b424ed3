"""Tests for parse events, running statistics and exporters."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from typelit.lang import errors, grammar
from typelit.telemetry import exporters, hooks, logger, metrics


@pytest.fixture
def stats():
    stats = metrics.get_stats()
    stats.reset()
    yield stats
    stats.reset()


def test_successful_parse_publishes_event_and_updates_stats(stats) -> None:
    events: list[hooks.ParseEvent] = []
    with hooks.subscribe(hooks.PARSE_COMPLETED, events.append):
        grammar.parse("let a = 1; let b = 2;", filename="two.tl")
    grammar.parse("3")

    assert len(events) == 1
    assert events[0].ok
    assert events[0].expressions == 2
    assert events[0].filename == "two.tl"
    snapshot = stats.snapshot()
    assert snapshot["parses"] == 2
    assert snapshot["succeeded"] == 2
    assert snapshot["expressions"] == 3
    assert snapshot["latency_ms"]["max"] >= snapshot["latency_ms"]["last"] >= 0.0


def test_failed_parse_is_counted_by_error_type(stats) -> None:
    events: list[hooks.ParseEvent] = []
    with hooks.subscribe(hooks.PARSE_FAILED, events.append):
        with pytest.raises(errors.TrailingInput):
            grammar.parse("1; x")
        with pytest.raises(errors.TrailingInput):
            grammar.parse("2 ?")
        with pytest.raises(errors.NestingTooDeep):
            grammar.parse("[" * 600)

    assert [event.error for event in events] == ["TrailingInput", "TrailingInput", "NestingTooDeep"]
    assert events[0].position == 3
    snapshot = stats.snapshot()
    assert snapshot["failed"] == 3
    assert snapshot["failures"] == {"TrailingInput": 2, "NestingTooDeep": 1}


def test_closed_subscription_stops_receiving_events(stats) -> None:
    events: list[hooks.ParseEvent] = []
    subscription = hooks.subscribe(hooks.PARSE_COMPLETED, events.append)
    grammar.parse("1")
    subscription.close()
    subscription.close()
    grammar.parse("2")
    assert len(events) == 1


def test_unknown_event_kind_is_rejected() -> None:
    with pytest.raises(ValueError):
        hooks.subscribe("parser.parse.started", print)


def test_broken_subscriber_does_not_abort_parse(stats) -> None:
    def explode(event: hooks.ParseEvent) -> None:
        raise RuntimeError("boom")

    with hooks.subscribe(hooks.PARSE_COMPLETED, explode):
        assert len(grammar.parse("true")) == 1
    assert stats.snapshot()["parses"] == 1


def test_stats_stay_bounded_over_many_parses(stats) -> None:
    before = sys.getsizeof(stats.__dict__) + sum(
        sys.getsizeof(value) for value in vars(stats).values()
    )
    for index in range(5000):
        grammar.parse(f"let n = {index};")
    for _ in range(50):
        with pytest.raises(errors.TrailingInput):
            grammar.parse("1 ?")

    after = sys.getsizeof(stats.__dict__) + sum(
        sys.getsizeof(value) for value in vars(stats).values()
    )
    snapshot = stats.snapshot()
    assert snapshot["parses"] == 5050
    assert snapshot["failures"] == {"TrailingInput": 50}
    assert len(stats.failures) == 1
    assert after - before < 512


def test_jsonl_exporter_appends_one_record_per_parse(tmp_path: Path, stats) -> None:
    target = tmp_path / "events.jsonl"
    previous = exporters.configure(exporters.JsonlExporter(target))
    try:
        grammar.parse("[1, 2]", filename="list.tl")
        with pytest.raises(errors.ParseError):
            grammar.parse("{", filename="broken.tl")
    finally:
        exporters.configure(previous)

    records = [json.loads(line) for line in target.read_text(encoding="utf-8").splitlines()]
    assert [record["event"] for record in records] == [hooks.PARSE_COMPLETED, hooks.PARSE_FAILED]
    assert records[0]["expressions"] == 1
    assert records[1]["filename"] == "broken.tl"
    assert records[1]["error"] == "UnexpectedEndOfInput"


def test_export_without_exporter_is_a_no_op(stats) -> None:
    previous = exporters.configure(None)
    try:
        grammar.parse("1")
    finally:
        exporters.configure(previous)
    assert stats.snapshot()["parses"] == 1


def test_set_level_rejects_unknown_names() -> None:
    with pytest.raises(ValueError):
        logger.set_level("chatty")
