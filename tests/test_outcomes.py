"""Tests for outcome entry validation and the append-only logs."""

import json
import threading
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from reflector.exceptions import (
    EntryValidationError,
    InvalidActionError,
    InvalidPrincipleCandidateError,
    InvalidQualityError,
    InvalidTimestampError,
    MissingPrincipleError,
    MissingTaskError,
    StorageError,
)
from reflector.outcomes import (
    QUALITY_TYPES,
    OutcomeEntry,
    OutcomeQuality,
    PrincipleAction,
    append_entry,
    build_entry,
    build_principle_change,
    get_outcomes_path,
    get_principles_history_path,
    load_outcomes,
    load_principle_changes,
    log_outcome,
    log_principle_change,
)

RECORD_KEYS = {"timestamp", "task", "channel", "outputQuality", "delta", "lesson", "principleCandidate"}


def read_log(path):
    """Parse a JSONL file into a list of dicts."""
    return [json.loads(line) for line in path.read_text(encoding="utf-8").split("\n") if line]


class TestBuildEntryValidation:
    def test_rejects_missing_task(self):
        with pytest.raises(MissingTaskError, match="task is required"):
            build_entry(None, "praise")

    @pytest.mark.parametrize("task", ["", "   ", "\t\n"])
    def test_rejects_blank_task(self, task):
        with pytest.raises(MissingTaskError):
            build_entry(task, "praise")

    def test_rejects_non_string_task(self):
        with pytest.raises(MissingTaskError):
            build_entry(42, "praise")

    def test_rejects_missing_quality(self):
        with pytest.raises(InvalidQualityError, match="quality must be one of"):
            build_entry("test", None)

    def test_invalid_quality_names_value_and_choices(self):
        with pytest.raises(InvalidQualityError) as exc_info:
            build_entry("test", "great")

        message = str(exc_info.value)
        assert 'got: "great"' in message
        for quality in QUALITY_TYPES:
            assert quality in message
        assert exc_info.value.value == "great"

    def test_quality_is_case_sensitive(self):
        with pytest.raises(InvalidQualityError):
            build_entry("test", "Praise")

    def test_validation_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            build_entry("", "praise")
        with pytest.raises(EntryValidationError):
            build_entry("test", "great")

    def test_accepts_all_quality_types(self):
        for quality in QUALITY_TYPES:
            entry = build_entry("test", quality)
            assert entry.output_quality.value == quality

    def test_accepts_enum_quality(self):
        assert build_entry("test", OutcomeQuality.SILENCE).output_quality is OutcomeQuality.SILENCE

    def test_rejects_unparseable_timestamp(self):
        with pytest.raises(InvalidTimestampError):
            build_entry("test", "praise", timestamp="yesterday")


class TestBuildEntryConstruction:
    def test_complete_entry(self):
        entry = build_entry(
            "Draft email",
            "edit",
            delta="Shortened introduction",
            lesson="Executives want brevity",
            channel="telegram",
            timestamp="2026-01-15T10:00:00Z",
        )

        assert entry.task == "Draft email"
        assert entry.output_quality is OutcomeQuality.EDIT
        assert entry.delta == "Shortened introduction"
        assert entry.lesson == "Executives want brevity"
        assert entry.channel == "telegram"
        assert entry.timestamp == datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert entry.principle_candidate is False

    def test_trims_task(self):
        assert build_entry("  padded task \n", "praise").task == "padded task"

    def test_optional_fields_default_to_none(self):
        entry = build_entry("test", "praise")

        assert entry.channel is None
        assert entry.delta is None
        assert entry.lesson is None

    def test_blank_optional_fields_normalize_to_none(self):
        entry = build_entry("test", "praise", channel="", delta="  ", lesson="")

        assert entry.channel is None
        assert entry.delta is None
        assert entry.lesson is None

    def test_timestamp_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        entry = build_entry("test", "praise")
        after = datetime.now(timezone.utc)

        assert before <= entry.timestamp <= after
        assert entry.timestamp.tzinfo is not None

    def test_naive_timestamp_treated_as_utc(self):
        entry = build_entry("test", "praise", timestamp=datetime(2026, 3, 1, 8, 0))
        assert entry.timestamp == datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_offset_timestamp_preserved(self):
        entry = build_entry("test", "praise", timestamp="2026-03-01T08:00:00+07:00")
        assert entry.timestamp.utcoffset() == timedelta(hours=7)

    def test_entry_is_immutable(self):
        entry = build_entry("test", "praise")
        with pytest.raises(ValidationError):
            entry.task = "changed"


class TestPrincipleCandidate:
    def test_correction_is_flagged_by_default(self):
        assert build_entry("test", "correction").principle_candidate is True

    @pytest.mark.parametrize("quality", ["edit", "praise", "silence", "unknown"])
    def test_other_qualities_not_flagged_by_default(self, quality):
        assert build_entry("test", quality).principle_candidate is False

    @pytest.mark.parametrize("quality", ["edit", "praise", "silence", "unknown"])
    def test_explicit_flag(self, quality):
        assert build_entry("test", quality, principle_candidate=True).principle_candidate is True

    def test_explicit_false_overrides_correction(self):
        assert build_entry("test", "correction", principle_candidate=False).principle_candidate is False

    @pytest.mark.parametrize("flag", ["false", 0, 1, "yes"])
    def test_non_bool_override_rejected(self, flag):
        with pytest.raises(InvalidPrincipleCandidateError, match="true or false"):
            build_entry("test", "correction", principle_candidate=flag)

    def test_non_bool_override_leaves_log_untouched(self, workspace_root):
        with pytest.raises(EntryValidationError):
            log_outcome(workspace_root, "test", "edit", principle_candidate="false")

        assert not get_outcomes_path(workspace_root).exists()


class TestAppendEntry:
    def test_creates_directory_and_file(self, workspace_root):
        path = append_entry(build_entry("test", "praise"), workspace_root)

        assert path == workspace_root / "memory" / "reflector" / "outcomes.jsonl"
        assert path.exists()

    def test_serialized_record_format(self, workspace_root):
        entry = build_entry("Draft email", "correction", channel="slack", timestamp="2026-01-15T10:00:00Z")
        path = append_entry(entry, workspace_root)

        raw = path.read_text(encoding="utf-8")
        assert raw.endswith("\n")
        assert raw.count("\n") == 1

        record = json.loads(raw)
        assert set(record) == RECORD_KEYS
        assert record["task"] == "Draft email"
        assert record["outputQuality"] == "correction"
        assert record["channel"] == "slack"
        assert record["delta"] is None
        assert record["lesson"] is None
        assert record["principleCandidate"] is True
        parsed = datetime.fromisoformat(record["timestamp"].replace("Z", "+00:00"))
        assert parsed == datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)

    def test_non_ascii_written_as_utf8(self, workspace_root):
        path = append_entry(build_entry("Résumé für Zoë ✓", "praise"), workspace_root)

        assert "Résumé für Zoë ✓" in path.read_text(encoding="utf-8")
        assert read_log(path)[0]["task"] == "Résumé für Zoë ✓"

    def test_appends_in_call_order(self, workspace_root):
        append_entry(build_entry("first", "praise"), workspace_root)
        append_entry(build_entry("second", "edit"), workspace_root)

        records = read_log(get_outcomes_path(workspace_root))
        assert [r["task"] for r in records] == ["first", "second"]

    def test_never_rewrites_existing_lines(self, workspace_root):
        path = get_outcomes_path(workspace_root)
        path.parent.mkdir(parents=True)
        path.write_text('{"legacy": true}\n', encoding="utf-8")

        append_entry(build_entry("new", "praise"), workspace_root)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == '{"legacy": true}'
        assert json.loads(lines[1])["task"] == "new"

    def test_concurrent_appends_produce_whole_lines(self, workspace_root):
        def writer(n):
            for i in range(20):
                append_entry(build_entry(f"writer {n} entry {i} " + "x" * 500, "praise"), workspace_root)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records = read_log(get_outcomes_path(workspace_root))
        assert len(records) == 80
        assert all(set(r) == RECORD_KEYS for r in records)

    def test_storage_failure(self, workspace_root):
        (workspace_root / "memory").write_text("not a directory")

        with pytest.raises(StorageError):
            append_entry(build_entry("test", "praise"), workspace_root)


class TestLogOutcome:
    def test_returns_written_entry(self, workspace_root):
        entry = log_outcome(workspace_root, "API research", "praise", channel="telegram")

        assert isinstance(entry, OutcomeEntry)
        records = read_log(get_outcomes_path(workspace_root))
        assert records == [entry.to_json_dict()]

    def test_two_calls_two_lines(self, workspace_root):
        log_outcome(workspace_root, "one", "edit")
        log_outcome(workspace_root, "two", "correction")

        records = read_log(get_outcomes_path(workspace_root))
        assert len(records) == 2
        assert [r["task"] for r in records] == ["one", "two"]
        assert [r["principleCandidate"] for r in records] == [False, True]

    def test_rejected_call_leaves_log_absent(self, workspace_root):
        with pytest.raises(MissingTaskError):
            log_outcome(workspace_root, "  ", "praise")

        assert not get_outcomes_path(workspace_root).exists()
        assert list(workspace_root.iterdir()) == []

    def test_rejected_call_leaves_log_unchanged(self, workspace_root):
        log_outcome(workspace_root, "valid", "praise")
        path = get_outcomes_path(workspace_root)
        before = path.read_bytes()

        with pytest.raises(InvalidQualityError):
            log_outcome(workspace_root, "invalid", "great")

        assert path.read_bytes() == before
        assert len(read_log(path)) == 1


class TestPrincipleChanges:
    def test_build_change(self):
        change = build_principle_change("add", "  Verify dates  ", reason="Two date corrections")

        assert change.action is PrincipleAction.ADD
        assert change.principle == "Verify dates"
        assert change.reason == "Two date corrections"
        assert change.evidence is None

    def test_rejects_blank_principle(self):
        with pytest.raises(MissingPrincipleError):
            build_principle_change("add", " ")

    def test_rejects_unknown_action(self):
        with pytest.raises(InvalidActionError, match='got: "delete"'):
            build_principle_change("delete", "Verify dates")

    def test_log_appends_to_history(self, workspace_root):
        log_principle_change(workspace_root, "add", "Verify dates", timestamp="2026-02-01T03:00:00Z")
        log_principle_change(workspace_root, "retire", "Verify dates", evidence="No corrections in 8 weeks")

        records = read_log(get_principles_history_path(workspace_root))
        assert [r["action"] for r in records] == ["add", "retire"]
        assert set(records[0]) == {"timestamp", "action", "principle", "reason", "evidence"}
        assert records[1]["evidence"] == "No corrections in 8 weeks"
        assert not get_outcomes_path(workspace_root).exists()

    def test_rejected_change_leaves_history_absent(self, workspace_root):
        with pytest.raises(InvalidActionError):
            log_principle_change(workspace_root, "rename", "Verify dates")

        assert not get_principles_history_path(workspace_root).exists()


class TestLoadRecords:
    def test_missing_log_returns_empty(self, workspace_root):
        assert load_outcomes(workspace_root) == []
        assert load_principle_changes(workspace_root) == []

    def test_loads_in_file_order(self, workspace_root):
        written = [
            log_outcome(workspace_root, "one", "praise", timestamp="2026-01-01T00:00:00Z"),
            log_outcome(workspace_root, "two", "correction", delta="wrong day"),
        ]

        assert load_outcomes(workspace_root) == written

    def test_skips_blank_and_malformed_lines(self, workspace_root, caplog):
        log_outcome(workspace_root, "good", "praise")
        path = get_outcomes_path(workspace_root)
        with open(path, "a", encoding="utf-8") as f:
            f.write("\n")
            f.write("{not json\n")
            f.write('{"task": "missing fields"}\n')
        log_outcome(workspace_root, "also good", "edit")

        with caplog.at_level("WARNING"):
            entries = load_outcomes(workspace_root)

        assert [e.task for e in entries] == ["good", "also good"]
        assert "Skipping malformed line" in caplog.text

    def test_skips_lines_that_are_not_utf8(self, workspace_root, caplog):
        log_outcome(workspace_root, "good", "praise")
        path = get_outcomes_path(workspace_root)
        with open(path, "ab") as f:
            f.write(b'{"task": "\xff\xfe"}\n')
        log_outcome(workspace_root, "also good", "edit")

        with caplog.at_level("WARNING"):
            entries = load_outcomes(workspace_root)

        assert [e.task for e in entries] == ["good", "also good"]
        assert "Skipping malformed line 2" in caplog.text

    def test_loads_principle_changes(self, workspace_root):
        log_principle_change(workspace_root, "modify", "Be brief", reason="Edits keep shortening replies")

        changes = load_principle_changes(workspace_root)
        assert len(changes) == 1
        assert changes[0].action is PrincipleAction.MODIFY
