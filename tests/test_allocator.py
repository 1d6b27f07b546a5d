"""
Unit tests for the identifier allocator helpers.
"""
from app.services.allocator import max_id, next_id, reseed, valid_id


class TestValidId:
    def test_positive_int(self):
        assert valid_id(7) == 7

    def test_rejects_zero_and_negative(self):
        assert valid_id(0) is None
        assert valid_id(-3) is None

    def test_rejects_non_int(self):
        assert valid_id("7") is None
        assert valid_id(7.0) is None
        assert valid_id(None) is None

    def test_rejects_bool(self):
        assert valid_id(True) is None


class TestMaxId:
    def test_empty(self):
        assert max_id([]) == 0

    def test_malformed_rows_contribute_nothing(self):
        rows = [
            {"id": 3},
            {"id": "70"},
            {"id": True},
            {},
            "junk",
            {"id": -2},
            {"id": 5},
        ]
        assert max_id(rows) == 5

    def test_unordered(self):
        assert max_id([{"id": 9}, {"id": 2}, {"id": 4}]) == 9


class TestNextId:
    def test_returns_then_increments(self):
        seq = {"feedings": 4}
        assert next_id(seq, "feedings") == 4
        assert next_id(seq, "feedings") == 5
        assert seq["feedings"] == 6

    def test_missing_counter_starts_at_one(self):
        seq = {}
        assert next_id(seq, "sleeps") == 1
        assert seq["sleeps"] == 2

    def test_garbage_counter_starts_at_one(self):
        seq = {"sleeps": "lots"}
        assert next_id(seq, "sleeps") == 1

    def test_counters_are_independent(self):
        seq = {"feedings": 10, "diapers": 1}
        next_id(seq, "feedings")
        assert seq["diapers"] == 1


class TestReseed:
    def test_empty_collection(self):
        seq = {"growth": 40}
        assert reseed(seq, "growth", []) == 1
        assert seq["growth"] == 1

    def test_max_plus_one(self):
        seq = {}
        assert reseed(seq, "feedings", [{"id": 50}]) == 51

    def test_ignores_malformed_ids(self):
        seq = {}
        assert reseed(seq, "feedings", [{"id": "x"}, {"id": 2}, {"note": "no id"}]) == 3
