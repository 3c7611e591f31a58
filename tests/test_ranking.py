"""Tests for top-N rankings."""

from dropship_manager.engine.ranking import rank_entries, top_n


def value_of(pair):
    return pair[1]


class TestTopN:
    def test_orders_by_metric_descending(self):
        subjects = [("a", 5), ("b", 20), ("c", 10)]

        ranked = top_n(subjects, value_of, 2)

        assert [s[0] for s, _ in ranked] == ["b", "c"]

    def test_zero_metric_excluded(self):
        subjects = [("a", 0), ("b", 3), ("c", 0)]

        assert [s[0] for s, _ in top_n(subjects, value_of, 5)] == ["b"]

    def test_ties_keep_input_order(self):
        subjects = [("b", 7), ("a", 7), ("c", 9)]

        assert [s[0] for s, _ in top_n(subjects, value_of, 3)] == ["c", "b", "a"]

    def test_non_positive_n(self):
        assert top_n([("a", 1)], value_of, 0) == []
        assert top_n([("a", 1)], value_of, -3) == []

    def test_fewer_subjects_than_n(self):
        assert len(top_n([("a", 1), ("b", 2)], value_of, 10)) == 2


def test_rank_entries_uses_name_fn():
    entries = rank_entries(
        [("v-1", 10), ("v-2", 30)],
        value_of,
        5,
        id_fn=lambda s: s[0],
        name_fn=lambda s: s[0].upper(),
    )

    assert [(e.subject_id, e.name, e.value) for e in entries] == [("v-2", "V-2", 30), ("v-1", "V-1", 10)]
