"""Tests for storage.py"""

import json

import pytest

from storage import InMemoryBalanceStore, InMemoryHistoryStore, JsonFileHistoryStore


class TestInMemoryHistoryStore:
    def test_append_keeps_order(self, history):
        store = InMemoryHistoryStore()
        rounds = history('BPT')
        for r in rounds:
            store.append(r)
        assert store.all() == rounds
        assert len(store) == 3

    def test_all_returns_a_copy(self, history):
        store = InMemoryHistoryStore()
        store.append(history('B')[0])
        store.all().clear()
        assert len(store.all()) == 1

    def test_clear(self, history):
        store = InMemoryHistoryStore()
        store.append(history('P')[0])
        store.clear()
        assert store.all() == []


class TestJsonFileHistoryStore:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileHistoryStore(str(tmp_path / 'none.jsonl')).all() == []

    def test_round_trip_through_file(self, tmp_path, history):
        path = tmp_path / 'sub' / 'h.jsonl'
        store = JsonFileHistoryStore(str(path))
        rounds = history('BBPTP')
        for r in rounds:
            store.append(r)
        assert JsonFileHistoryStore(str(path)).all() == rounds
        assert len(store) == 5

    def test_one_versioned_record_per_line(self, tmp_path, history):
        path = tmp_path / 'h.jsonl'
        store = JsonFileHistoryStore(str(path))
        for r in history('BT'):
            store.append(r)
        lines = path.read_text(encoding='utf-8').splitlines()
        assert len(lines) == 2
        assert [json.loads(line)['version'] for line in lines] == [1, 1]
        assert '和局' in lines[1]

    def test_blank_lines_skipped(self, tmp_path, history):
        path = tmp_path / 'h.jsonl'
        store = JsonFileHistoryStore(str(path))
        store.append(history('B')[0])
        with open(path, 'a', encoding='utf-8') as f:
            f.write('\n\n')
        assert len(store.all()) == 1

    def test_corrupt_line_reports_line_number(self, tmp_path, history):
        path = tmp_path / 'h.jsonl'
        store = JsonFileHistoryStore(str(path))
        store.append(history('B')[0])
        with open(path, 'a', encoding='utf-8') as f:
            f.write('{"version": 1, "player": {}}\n')
        with pytest.raises(ValueError, match='第 2 行'):
            store.all()

    def test_clear_removes_file(self, tmp_path, history):
        path = tmp_path / 'h.jsonl'
        store = JsonFileHistoryStore(str(path))
        store.append(history('B')[0])
        store.clear()
        assert not path.exists()
        assert store.all() == []
        store.clear()


class TestInMemoryBalanceStore:
    def test_get_set(self):
        store = InMemoryBalanceStore(100)
        assert store.get() == 100
        store.set(0)
        assert store.get() == 0

    def test_negative_rejected(self):
        store = InMemoryBalanceStore(100)
        with pytest.raises(ValueError):
            store.set(-1)
        assert store.get() == 100
        with pytest.raises(ValueError):
            InMemoryBalanceStore(-5)
