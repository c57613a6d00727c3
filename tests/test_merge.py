"""Tests für das Zusammenführen von Vertretungen und Tagen."""

from datetime import date, datetime

import pytest

from analysis.merge import (
    MergeRule,
    apply_rule,
    matching_rule,
    merge_days,
    merge_substitution,
    merge_substitutions,
)
from models.schedule_day import ScheduleDay
from models.substitution import Substitution


def _base() -> Substitution:
    return Substitution(
        classes={"1a", "2a"},
        subject="Deu",
        previous_subject="Spa",
        room="42",
        teachers={"Mül", "Mei"},
        previous_teachers={"Sm", "Sn"},
    )


# ─── REGELN ───────────────────────────────────────────────────────────────────

class TestMergeRules:
    def test_rule_order_classes_first(self):
        s = _base()
        assert matching_rule(s, s.with_classes({"3a"})) is MergeRule.CLASSES
        assert matching_rule(s, s.with_teachers({"Xy"})) is MergeRule.TEACHERS
        assert matching_rule(s, s.with_previous_teachers({"Xy"})) is MergeRule.PREVIOUS_TEACHERS

    def test_no_rule_for_different_subject(self):
        s = _base()
        other = Substitution(classes={"3a"}, subject="Mat", room="42")
        assert matching_rule(s, other) is None

    def test_apply_rule_unions(self):
        s = _base()
        merged = apply_rule(s, s.with_classes({"3a"}), MergeRule.CLASSES)
        assert merged.classes == frozenset({"1a", "2a", "3a"})
        assert merged.teachers == s.teachers


# ─── TAG ──────────────────────────────────────────────────────────────────────

class TestMergeIntoDay:
    def test_different_classes(self):
        """Gleiche Vertretung für 1a/2a und 3a/4a → ein Eintrag für alle vier Klassen."""
        s1 = _base()
        s2 = s1.with_classes({"3a", "4a"})
        day = ScheduleDay().with_substitutions([s1, s2])
        assert len(day.substitutions) == 1
        assert day.substitutions[0].classes == frozenset({"1a", "2a", "3a", "4a"})

    def test_different_teachers(self):
        s1 = _base()
        s2 = s1.with_teachers({"Sm", "Sn"})
        day = ScheduleDay().with_substitutions([s1, s2])
        assert len(day.substitutions) == 1
        assert day.substitutions[0].teachers == frozenset({"Mül", "Mei", "Sm", "Sn"})

    def test_different_previous_teachers(self):
        s1 = _base()
        s2 = s1.with_previous_teachers({"Mül", "Mei"})
        day = ScheduleDay().with_substitutions([s1, s2])
        assert len(day.substitutions) == 1
        assert day.substitutions[0].previous_teachers == frozenset({"Mül", "Mei", "Sm", "Sn"})

    def test_constructor_merges(self):
        s1 = _base()
        day = ScheduleDay(substitutions=[s1, s1.with_classes({"3a", "4a"})])
        assert len(day.substitutions) == 1

    def test_idempotent(self):
        s = _base()
        day = ScheduleDay().with_substitution(s).with_substitution(s)
        assert day.substitutions == (s,)

    def test_unrelated_kept_in_order(self):
        s1 = _base()
        s2 = Substitution(classes={"7b"}, lesson="6", subject="Mat")
        day = ScheduleDay().with_substitutions([s1, s2])
        assert day.substitutions == (s1, s2)

    def test_merge_replaces_in_place(self):
        s1 = Substitution(classes={"5a"}, lesson="1", subject="Deu")
        s2 = Substitution(classes={"6b"}, lesson="2", subject="Mat")
        result = merge_substitution((s1, s2), s1.with_classes({"5b"}))
        assert result[0].classes == frozenset({"5a", "5b"})
        assert result[1] == s2

    def test_duplicates_after_merge_removed(self):
        s = Substitution(classes={"5a"}, lesson="1", subject="Deu")
        merged = s.with_classes({"5a", "5b"})
        result = merge_substitution((s, merged), s.with_classes({"5b"}))
        assert result == (merged,)

    def test_merge_substitutions_order_independent_classes(self):
        s = Substitution(classes={"5a"}, lesson="1", subject="Deu")
        parts = [s, s.with_classes({"5b"}), s.with_classes({"5c"})]
        forward = merge_substitutions(parts)
        backward = merge_substitutions(reversed(parts))
        assert forward[0].classes == backward[0].classes == frozenset({"5a", "5b", "5c"})

    def test_input_unchanged(self):
        s1 = _base()
        day = ScheduleDay().with_substitution(s1)
        day.with_substitution(s1.with_classes({"3a"}))
        assert day.substitutions[0].classes == frozenset({"1a", "2a"})


# ─── TAGE ZUSAMMENFÜHREN ──────────────────────────────────────────────────────

class TestMergeDays:
    def test_merge_same_date(self):
        s = Substitution(classes={"5a"}, lesson="1", subject="Deu")
        a = ScheduleDay(date=date(2026, 10, 19), last_change=datetime(2026, 10, 18, 8, 0),
                        substitutions=[s], messages=("A",))
        b = ScheduleDay(date=date(2026, 10, 19), last_change=datetime(2026, 10, 18, 9, 0),
                        substitutions=[s.with_classes({"5b"})], messages=("A", "B"))
        merged = merge_days(a, b)
        assert merged.messages == ("A", "B")
        assert merged.last_change == datetime(2026, 10, 18, 9, 0)
        assert len(merged.substitutions) == 1
        assert merged.substitutions[0].classes == frozenset({"5a", "5b"})

    def test_keeps_later_last_change(self):
        a = ScheduleDay(date=date(2026, 10, 19), last_change=datetime(2026, 10, 18, 10, 0))
        b = ScheduleDay(date=date(2026, 10, 19), last_change=datetime(2026, 10, 18, 9, 0))
        assert merge_days(a, b).last_change == datetime(2026, 10, 18, 10, 0)
        assert a.merged_with(b).last_change == datetime(2026, 10, 18, 10, 0)

    def test_different_dates_raise(self):
        a = ScheduleDay(date=date(2026, 10, 19))
        b = ScheduleDay(date=date(2026, 10, 20))
        with pytest.raises(ValueError):
            merge_days(a, b)
