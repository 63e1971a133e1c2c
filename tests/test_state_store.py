import json
import os

from timekeeper.infra.state_store import TimerStateStore
from timekeeper.models import Phase, Timer, TimerState


def make_timer(timer_id="1", **overrides):
    fields = dict(
        id=timer_id,
        duration_text="25m",
        seconds=1500,
        message="Tea",
        start_time="2026-01-05T09:00:00.000000+00:00",
        end_time="2026-01-05T09:25:00.000000+00:00",
    )
    fields.update(overrides)
    return Timer(**fields)


def test_missing_file_is_empty(store, state_file):
    assert not state_file.exists()
    assert store.load() == []


def test_save_and_load(store):
    store.save([make_timer("1"), make_timer("2", message="Pasta")])

    loaded = store.load()

    assert [t.id for t in loaded] == ["1", "2"]
    assert loaded[1].message == "Pasta"
    assert loaded[0].state == TimerState.RUNNING


def test_saving_empty_collection_deletes_file(store, state_file):
    store.save([make_timer()])
    assert state_file.exists()

    store.save([])

    assert not state_file.exists()
    assert store.load() == []


def test_file_uses_camel_case_records(store, state_file):
    store.save([make_timer()])

    records = json.loads(state_file.read_text())

    assert isinstance(records, list)
    record = records[0]
    assert record["durationText"] == "25m"
    assert record["startTime"] == "2026-01-05T09:00:00.000000+00:00"
    assert record["repeatTotal"] == 1
    assert record["repeatRemaining"] == 0
    assert record["currentRun"] == 1
    assert record["state"] == "Running"
    assert record["isSequence"] is False
    assert "phases" not in record
    assert "sequencePattern" not in record


def test_sequence_record_fields(store, state_file):
    phase = Phase(seconds=60, label="a", original_duration_text="1m", loop_id="1", loop_iteration=1, loop_total=2)
    store.save([make_timer(
        is_sequence=True,
        sequence_pattern="(1m a)x2",
        phases=[phase, phase.model_copy(update={"loop_iteration": 2})],
        current_phase_index=0,
        total_phases=2,
        current_phase_label="a",
        total_sequence_seconds=120,
    )])

    record = json.loads(state_file.read_text())[0]

    assert record["sequencePattern"] == "(1m a)x2"
    assert record["totalPhases"] == 2
    assert record["phases"][1] == {
        "seconds": 60,
        "label": "a",
        "originalDurationText": "1m",
        "loopId": "1",
        "loopIteration": 2,
        "loopTotal": 2,
    }


def test_corrupt_file_is_empty(store, state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text("[{not json")

    assert store.load() == []


def test_undecodable_file_is_empty(store, state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_bytes(b"\xff\xfe\x00garbage")

    assert store.load() == []


def test_single_record_object_is_accepted(store, state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text(json.dumps(make_timer("7").to_record()))

    assert [t.id for t in store.load()] == ["7"]


def test_invalid_records_are_skipped(store, state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text(json.dumps([{"id": "1"}, make_timer("2").to_record()]))

    assert [t.id for t in store.load()] == ["2"]


def test_load_returns_independent_copies(store):
    store.save([make_timer()])

    first = store.load()
    first[0].message = "changed"

    assert store.load()[0].message == "Tea"


def test_has_changed_after_external_write(store, state_file):
    store.save([make_timer()])
    store.load()
    assert not store.has_changed()

    other = TimerStateStore(state_file)
    other.save([make_timer(), make_timer("2")])
    stat = state_file.stat()
    os.utime(state_file, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

    assert store.has_changed()
    assert [t.id for t in store.load()] == ["1", "2"]


def test_get(store):
    store.save([make_timer("1"), make_timer("2")])

    assert store.get("2").id == "2"
    assert store.get("3") is None


def test_next_id():
    assert TimerStateStore.next_id([]) == "1"
    assert TimerStateStore.next_id([make_timer("1"), make_timer("4")]) == "5"
    assert TimerStateStore.next_id([make_timer("abc")]) == "1"


def test_no_temp_files_left_behind(store, state_file):
    store.save([make_timer()])
    store.save([make_timer(), make_timer("2")])

    assert sorted(p.name for p in state_file.parent.iterdir()) == ["timers.json"]
