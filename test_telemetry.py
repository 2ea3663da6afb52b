"""
Round Telemetry Tests
=====================

Payload schemas, recorders and structured logging.

Usage:
    pytest test_telemetry.py -v
"""

import io
import json
import logging

import pytest

from freesets_telemetry import (
    BaseRecorder,
    ConsoleRecorder,
    EnclosureData,
    LogEvent,
    MarbleData,
    RoundData,
    StructuredLogger,
    Vertex,
)


def sample_round(**overrides):
    fields = dict(
        round_number=2,
        game_mode="innerDist",
        marble_count=18,
        enclosure_count=3,
        start_time=1_700_000_000.0,
        end_time=1_700_000_030.5,
        sim_start_time=1_700_000_020.0,
        sim_end_time=1_700_000_025.0,
        marbles=[MarbleData.from_positions(0, (10.0, 10.0), (13.0, 14.0), 1_700_000_020.0, 1_700_000_025.0)],
        enclosures=[
            EnclosureData(
                id=0,
                vertices=[Vertex(0, 0), Vertex(10, 0), Vertex(10, 10)],
                area=50.0,
                perimeter=34.14,
                draw_time=1_700_000_010.0,
                marble_count=1,
            )
        ],
        marble_counts=[1, 4, 6],
        operation_set=[2, 3, 7, 9, 12],
        overlapping_elements=[],
        is_winner=True,
        attempts=2,
    )
    fields.update(overrides)
    return RoundData(**fields)


class BrokenRecorder(BaseRecorder):
    def _deliver(self, payload):
        raise OSError("connection refused")


@pytest.fixture
def logger():
    return StructuredLogger(component="test")


def test_marble_distance():
    marble = MarbleData.from_positions(3, (10.0, 10.0), (13.0, 14.0), 0.0, 1.0)
    assert marble.total_distance == pytest.approx(5.0)
    assert marble.end_y == 14.0


def test_round_data_json_round_trip():
    original = sample_round()

    restored = RoundData.from_dict(json.loads(json.dumps(original.to_dict())))

    assert restored == original
    assert restored.simulation_seconds == pytest.approx(5.0)


def test_round_data_validation():
    with pytest.raises(ValueError):
        sample_round(game_mode="product")
    with pytest.raises(ValueError):
        sample_round(round_number=0)
    with pytest.raises(ValueError):
        sample_round(is_winner=True, overlapping_elements=[4])
    with pytest.raises(ValueError):
        sample_round(attempts=0)


def test_round_data_missing_field():
    data = sample_round().to_dict()
    del data['game_mode']

    with pytest.raises(ValueError, match="Missing required RoundData field"):
        RoundData.from_dict(data)


def test_enclosure_data_requires_polygon():
    with pytest.raises(ValueError):
        EnclosureData(id=0, vertices=[Vertex(0, 0), Vertex(1, 1)], area=0.0, perimeter=0.0, draw_time=0.0)


def test_vertex_must_be_finite():
    with pytest.raises(ValueError):
        Vertex(float("nan"), 0.0)


def test_round_data_without_simulation():
    data = sample_round(sim_start_time=None, sim_end_time=None, marbles=[])
    assert data.simulation_seconds is None
    assert "Round 2 (innerDist)" in str(data)


def test_console_recorder_writes_json_line(logger):
    stream = io.StringIO()
    recorder = ConsoleRecorder(stream=stream, logger=logger)

    assert recorder.record(sample_round())
    assert recorder.record(sample_round(round_number=3))

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    payload = json.loads(lines[0])
    assert payload['round_number'] == 2
    assert payload['marble_counts'] == [1, 4, 6]
    assert payload['enclosures'][0]['vertices'][1] == {'x': 10, 'y': 0}
    assert recorder.get_stats() == {'recorder': 'console', 'record_count': 2, 'failure_count': 0}


def test_failed_delivery_is_reported_not_raised(logger):
    recorder = BrokenRecorder(name="broken", logger=logger)

    assert recorder.record(sample_round()) is False
    assert recorder.get_stats()['failure_count'] == 1
    assert recorder.get_stats()['record_count'] == 0


def test_structured_log_line_is_json(logger, caplog):
    with caplog.at_level(logging.INFO, logger="freesets.test"):
        logger.info(
            event=LogEvent.ENCLOSURE_ACCEPTED,
            message="Enclosure 0 accepted",
            metadata={'enclosure_id': 0, 'area': 40000.0},
        )

    entry = json.loads(caplog.records[-1].getMessage())
    assert entry['event'] == "enclosure.accepted"
    assert entry['component'] == "test"
    assert entry['level'] == "INFO"
    assert entry['metadata'] == {'enclosure_id': 0, 'area': 40000.0}


def test_error_log_carries_exception(logger, caplog):
    with caplog.at_level(logging.ERROR, logger="freesets.test"):
        logger.error(
            event=LogEvent.RECORDER_FAILED,
            message="Failed to deliver round data",
            exc_info=OSError("disk full"),
        )

    entry = json.loads(caplog.records[-1].getMessage())
    assert entry['exception'] == {'type': 'OSError', 'message': 'disk full'}


def test_event_categories():
    from freesets_telemetry.logging.events import ERROR_EVENTS, ROUND_EVENTS

    assert LogEvent.CONFIG_ERROR in ERROR_EVENTS
    assert LogEvent.ROUND_RETRIED in ROUND_EVENTS
    assert LogEvent("win.evaluated") is LogEvent.WIN_CONDITION_EVALUATED


def test_bound_context_is_merged_into_metadata(logger, caplog):
    round_logger = logger.bind(round_number=4)

    with caplog.at_level(logging.INFO, logger="freesets.test"):
        round_logger.info(event=LogEvent.ROUND_SCORED, message="Round 4 won", metadata={'is_winner': True})
        logger.info(event=LogEvent.ROUND_STARTED, message="Round 5 started")

    bound, plain = (json.loads(r.getMessage()) for r in caplog.records[-2:])
    assert bound['metadata'] == {'round_number': 4, 'is_winner': True}
    assert 'metadata' not in plain
