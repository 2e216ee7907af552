"""Tests for the local dream journal."""

import json

import pytest

from agents.dream_analysis import FALLBACK_ANALYSIS
from shared.journal import DreamJournal
from shared.models import DreamAnalysisResult, JournalEntry


@pytest.fixture
def journal(tmp_path):
    return DreamJournal(tmp_path / "journal" / "dreams.json")


@pytest.fixture
def result(valid_analysis):
    return DreamAnalysisResult.model_validate(valid_analysis)


class TestDreamJournal:

    def test_missing_file_is_empty(self, journal):
        assert journal.entries() == []

    def test_save_assigns_id_and_timestamp(self, journal, result):
        entry = journal.save(result)

        assert isinstance(entry, JournalEntry)
        assert entry.id.startswith("drm_")
        assert entry.timestamp > 0
        assert entry.title == result.title
        assert journal.path.exists()

    def test_save_does_not_touch_result(self, journal, result):
        before = result.model_dump()
        journal.save(result)
        assert result.model_dump() == before

    def test_newest_first(self, journal, result):
        first = journal.save(result)
        second = journal.save(FALLBACK_ANALYSIS)

        assert [e.id for e in journal.entries()] == [second.id, first.id]

    def test_resaving_entry_gets_new_id(self, journal, result):
        entry = journal.save(result)
        again = journal.save(entry)

        assert again.id != entry.id
        assert len(journal.entries()) == 2

    def test_get(self, journal, result):
        entry = journal.save(result)

        assert journal.get(entry.id) == entry
        assert journal.get("drm_missing") is None

    def test_delete(self, journal, result):
        keep = journal.save(result)
        drop = journal.save(FALLBACK_ANALYSIS)

        assert journal.delete(drop.id) is True
        assert [e.id for e in journal.entries()] == [keep.id]

    def test_delete_unknown(self, journal, result):
        journal.save(result)
        assert journal.delete("drm_missing") is False
        assert len(journal.entries()) == 1

    def test_file_is_plain_json(self, journal, result):
        entry = journal.save(result)

        data = json.loads(journal.path.read_text(encoding="utf-8"))
        assert data[0]["id"] == entry.id
        assert data[0]["psychologicalState"]["burnoutRisk"] == "Moderate"
        assert isinstance(data[0]["symbols"], list)

    def test_corrupt_file_is_empty(self, journal):
        journal.path.parent.mkdir(parents=True)
        journal.path.write_text("{not json", encoding="utf-8")

        assert journal.entries() == []

    def test_non_list_file_is_empty(self, journal):
        journal.path.parent.mkdir(parents=True)
        journal.path.write_text('{"id": "x"}', encoding="utf-8")

        assert journal.entries() == []

    def test_malformed_entry_skipped(self, journal, result):
        entry = journal.save(result)
        data = json.loads(journal.path.read_text(encoding="utf-8"))
        data.append({"id": "drm_broken", "title": "no other fields"})
        journal.path.write_text(json.dumps(data), encoding="utf-8")

        assert [e.id for e in journal.entries()] == [entry.id]
