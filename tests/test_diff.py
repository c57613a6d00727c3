"""Tests für den Vergleich von Schnappschüssen: Vertretung, Tag, Plan."""

import json
from datetime import date

import pytest

from analysis.diff import DayDiff, ScheduleDiff, SubstitutionDiff, compare_day, compare_schedule
from analysis.similarity import find_similar, similarity_score
from models.additional_info import AdditionalInfo
from models.schedule import Schedule
from models.schedule_day import ScheduleDay
from models.substitution import Substitution

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
WEDNESDAY = date(2026, 10, 21)


def _sub(**kwargs) -> Substitution:
    data = dict(classes={"7b"}, lesson="6", type="Vertretung", subject="Deu",
                teachers={"KW"}, room="224")
    data.update(kwargs)
    return Substitution(**data)


def _day(*substitutions, on=MONDAY, messages=()) -> ScheduleDay:
    return ScheduleDay(date=on, substitutions=list(substitutions), messages=messages)


# ─── ÄHNLICHKEIT ──────────────────────────────────────────────────────────────

class TestSimilarity:
    def test_score_counts_equal_fields(self):
        assert similarity_score(_sub(), _sub()) == 9
        assert similarity_score(_sub(), _sub(room="225")) == 8

    def test_requires_same_classes(self):
        assert find_similar(_sub(), [_sub(classes={"7a"})]) is None

    def test_excluded_candidates_skipped(self):
        candidate = _sub(room="225")
        assert find_similar(_sub(), [candidate], excluded={candidate}) is None

    def test_best_candidate_wins(self):
        near = _sub(room="225")
        far = _sub(room="225", subject="Mat")
        assert find_similar(_sub(), [far, near]) == near

    def test_tie_first_candidate_wins(self):
        """Bei gleicher Punktzahl gewinnt der erste Kandidat."""
        first = _sub(room="101")
        second = _sub(lesson="2")
        assert find_similar(_sub(), [first, second]) == first
        assert find_similar(_sub(), [second, first]) == second


# ─── VERTRETUNG ───────────────────────────────────────────────────────────────

class TestSubstitutionDiff:
    def test_complexity(self):
        assert SubstitutionDiff(_sub(), _sub()).complexity == 0
        assert SubstitutionDiff(_sub(), _sub(room="225", desc="Text")).complexity == 2

    def test_teacher_set_counts_once(self):
        diff = SubstitutionDiff(_sub(), _sub(teachers={"KW", "ER"}))
        assert diff.complexity == 1

    def test_different_classes_raise(self):
        with pytest.raises(ValueError):
            SubstitutionDiff(_sub(), _sub(classes={"7a"}))

    def test_to_dict(self):
        data = SubstitutionDiff(_sub(), _sub(room="225")).to_dict()
        assert data["complexity"] == 1
        assert data["old"]["room"] == "224"
        assert data["new"]["classes"] == ["7b"]
        assert "<ins>" in data["text"]


# ─── TAG ──────────────────────────────────────────────────────────────────────

class TestDayDiff:
    def test_identical_days_empty(self):
        """Ein Tag mit sich selbst verglichen ergibt einen leeren Diff."""
        cancellation = Substitution(
            classes={"07B"}, lesson="6", type="Entfall", subject="Entfall",
            previous_subject="SPA", teachers={"KW", "ER"}, desc="fällt aus",
        )
        a = _day(cancellation, messages=("Sportfest am Freitag",))
        b = _day(cancellation.model_copy(), messages=("Sportfest am Freitag",))
        diff = compare_day(a, b)
        assert diff.is_empty()
        assert not diff.is_not_empty()

    def test_new_and_removed_messages(self):
        old = _day(messages=("A", "B"))
        new = _day(messages=("B", "C"))
        diff = compare_day(old, new)
        assert diff.new_messages == ("C",)
        assert diff.removed_messages == ("A",)

    def test_new_substitution(self):
        s = _sub()
        diff = compare_day(_day(), _day(s))
        assert diff.new_substitutions == (s,)
        assert diff.removed_substitutions == ()

    def test_removed_substitution(self):
        s = _sub()
        diff = compare_day(_day(s), _day())
        assert diff.removed_substitutions == (s,)

    def test_edited_substitution(self):
        old, new = _sub(), _sub(room="225")
        diff = compare_day(_day(old), _day(new))
        assert diff.edited_substitutions == (SubstitutionDiff(old, new),)
        assert diff.new_substitutions == ()
        assert diff.removed_substitutions == ()

    def test_too_complex_is_new_and_removed(self):
        """Mehr als 3 abweichende Felder → entfernt + neu statt geändert."""
        old = _sub()
        new = _sub(lesson="1", type="Entfall", subject="Mat", room="101")
        diff = compare_day(_day(old), _day(new))
        assert diff.edited_substitutions == ()
        assert diff.new_substitutions == (new,)
        assert diff.removed_substitutions == (old,)

    def test_max_complexity_parameter(self):
        old = _sub()
        new = _sub(lesson="1", type="Entfall", subject="Mat", room="101")
        diff = compare_day(_day(old), _day(new), max_complexity=4)
        assert len(diff.edited_substitutions) == 1

    def test_edited_within_bound(self):
        old = _sub()
        candidates = [_sub(room="225"), _sub(room="225", desc="x", subject="Mat")]
        for new in candidates:
            diff = compare_day(_day(old), _day(new))
            for edited in diff.edited_substitutions:
                assert edited.complexity <= 3

    def test_class_split(self):
        """Klassen 5a,5b → 5b,5c: 5c neu, 5a entfällt."""
        old = _sub(classes={"5a", "5b"})
        new = _sub(classes={"5b", "5c"})
        diff = compare_day(_day(old), _day(new))
        assert [s.classes for s in diff.new_substitutions] == [frozenset({"5c"})]
        assert [s.classes for s in diff.removed_substitutions] == [frozenset({"5a"})]
        assert diff.edited_substitutions == ()

    def test_class_split_conserves_classes(self):
        old = _sub(classes={"5a", "5b", "5c"})
        new = _sub(classes={"5c", "5d"})
        diff = compare_day(_day(old), _day(new))
        added = frozenset().union(*(s.classes for s in diff.new_substitutions))
        removed = frozenset().union(*(s.classes for s in diff.removed_substitutions))
        assert old.classes - removed | added == new.classes

    def test_unrelated_classes_not_paired(self):
        old = _sub(classes={"5a"}, room="101")
        new = _sub(classes={"5b"}, room="102")
        diff = compare_day(_day(old), _day(new))
        assert diff.new_substitutions == (new,)
        assert diff.removed_substitutions == (old,)

    def test_different_dates_raise(self):
        with pytest.raises(ValueError):
            compare_day(_day(on=MONDAY), _day(on=TUESDAY))

    def test_compare_classmethod(self):
        diff = DayDiff.compare(_day(_sub()), _day(_sub(room="225")))
        assert diff.date == MONDAY
        assert diff.display_date() == "Montag, 19.10.2026"


# ─── PLAN ─────────────────────────────────────────────────────────────────────

class TestScheduleDiff:
    def test_identical_schedules_empty(self):
        schedule = Schedule(days=[_day(_sub()), _day(on=TUESDAY)])
        assert compare_schedule(schedule, schedule).is_empty()

    def test_new_and_removed_days(self):
        old = Schedule(days=[_day(on=MONDAY), _day(on=TUESDAY)])
        new = Schedule(days=[_day(on=TUESDAY), _day(on=WEDNESDAY)])
        diff = compare_schedule(old, new)
        assert [d.date for d in diff.new_days] == [WEDNESDAY]
        assert [d.date for d in diff.removed_days] == [MONDAY]
        assert diff.edited_days == ()

    def test_unchanged_days_not_listed(self):
        old = Schedule(days=[_day(_sub(), on=MONDAY), _day(_sub(), on=TUESDAY)])
        new = Schedule(days=[_day(_sub(), on=MONDAY), _day(_sub(room="225"), on=TUESDAY)])
        diff = compare_schedule(old, new)
        assert [d.date for d in diff.edited_days] == [TUESDAY]

    def test_additional_infos(self):
        kept = AdditionalInfo(title="Termine", text="Elternabend")
        gone = AdditionalInfo(title="Mensa", text="geschlossen")
        added = AdditionalInfo(title="Mensa", text="geöffnet")
        diff = ScheduleDiff.compare(
            Schedule(additional_infos=[kept, gone]),
            Schedule(additional_infos=[kept, added]),
        )
        assert diff.new_additional_infos == (added,)
        assert diff.removed_additional_infos == (gone,)
        assert not diff.is_empty()

    def test_to_json(self):
        old = Schedule(days=[_day(_sub())])
        new = Schedule(days=[_day(_sub(room="225", desc="Raumänderung"))])
        data = json.loads(compare_schedule(old, new).to_json())
        assert set(data) == {
            "new_additional_infos", "removed_additional_infos",
            "new_days", "edited_days", "removed_days",
        }
        edited = data["edited_days"][0]
        assert edited["date"] == "2026-10-19"
        assert edited["edited_substitutions"][0]["complexity"] == 2

    def test_to_json_keeps_umlauts(self):
        new = Schedule(days=[_day(_sub(desc="fällt aus"))])
        assert "fällt aus" in compare_schedule(Schedule(), new).to_json()

    def test_split_snapshot_equals_merged_snapshot(self):
        """Ein Datum auf zwei Einträge verteilt ist derselbe Plan wie zusammengeführt."""
        first = _day(_sub(classes={"5a"}))
        second = _day(_sub(classes={"6b"}, subject="Mat"))
        split = Schedule(days=[first, second])
        merged = Schedule().with_day(first).with_day(second)
        assert compare_schedule(split, merged).is_empty()
        assert compare_schedule(merged, split).is_empty()

    def test_color_only_change_is_edited(self):
        old = _sub(color="#ff0000")
        new = _sub(color="#00ff00")
        diff = compare_day(_day(old), _day(new))
        assert diff.edited_substitutions == (SubstitutionDiff(old, new),)
        assert diff.edited_substitutions[0].complexity == 0


# ─── ÖFFENTLICHE SCHNITTSTELLE ────────────────────────────────────────────────

class TestPackageExports:
    def test_analysis_reexports(self):
        import analysis

        assert analysis.compare_schedule is compare_schedule
        assert analysis.compare_day is compare_day
        assert analysis.MAX_COMPLEXITY == 3
        for name in ("merge_substitution_into_day", "find_similar",
                     "filter_by_class_and_subject", "filter_by_teacher_and_subject"):
            assert callable(getattr(analysis, name))
