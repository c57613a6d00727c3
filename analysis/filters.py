"""Gefilterte Sichten auf Pläne und Diffs (eine Klasse bzw. eine Lehrkraft).

Alle Funktionen bauen neue Werte auf; die Quelle wird nie verändert.
Zusatzinfos werden nicht gefiltert.
"""

from typing import Callable, Iterable, Optional, Union

from analysis.diff import DayDiff, ScheduleDiff, SubstitutionDiff
from models.schedule import Schedule
from models.schedule_day import ScheduleDay
from models.substitution import Substitution

Filterable = Union[Schedule, ScheduleDay, ScheduleDiff, DayDiff]


# ─── Einzelne Vertretungen ────────────────────────────────────────────────────

def _subject_kept(s: Substitution, excluded_subjects: Optional[set[str]]) -> bool:
    """Maßgeblich ist das vorherige Fach, sonst das Fach; ohne beides bleibt
    die Vertretung erhalten."""
    if not excluded_subjects:
        return True
    if s.previous_subject is not None:
        return s.previous_subject not in excluded_subjects
    if s.subject is not None:
        return s.subject not in excluded_subjects
    return True


def _for_teacher(s: Substitution, teacher: str) -> bool:
    return teacher in s.teachers or teacher in s.previous_teachers


def filter_substitutions_by_class(the_class: Optional[str],
                                  substitutions: Iterable[Substitution]) -> tuple[Substitution, ...]:
    if the_class is None:
        return tuple(substitutions)
    return tuple(s for s in substitutions if the_class in s.classes)


def filter_substitutions_by_teacher(teacher: Optional[str],
                                    substitutions: Iterable[Substitution]) -> tuple[Substitution, ...]:
    if teacher is None:
        return tuple(substitutions)
    return tuple(s for s in substitutions if _for_teacher(s, teacher))


def filter_substitutions_by_subject(excluded_subjects: Optional[set[str]],
                                    substitutions: Iterable[Substitution]) -> tuple[Substitution, ...]:
    return tuple(s for s in substitutions if _subject_kept(s, excluded_subjects))


def filter_diffs_by_class(the_class: Optional[str],
                          diffs: Iterable[SubstitutionDiff]) -> tuple[SubstitutionDiff, ...]:
    if the_class is None:
        return tuple(diffs)
    return tuple(d for d in diffs if the_class in d.classes)


def filter_diffs_by_teacher(teacher: Optional[str],
                            diffs: Iterable[SubstitutionDiff]) -> tuple[SubstitutionDiff, ...]:
    if teacher is None:
        return tuple(diffs)
    return tuple(d for d in diffs if _for_teacher(d.old, teacher) or _for_teacher(d.new, teacher))


def filter_diffs_by_subject(excluded_subjects: Optional[set[str]],
                            diffs: Iterable[SubstitutionDiff]) -> tuple[SubstitutionDiff, ...]:
    return tuple(d for d in diffs if _subject_kept(d.new, excluded_subjects))


# ─── Tage und Pläne ───────────────────────────────────────────────────────────

def _project(
    target: Filterable,
    keep: Callable[[Iterable[Substitution]], tuple[Substitution, ...]],
    keep_diffs: Callable[[Iterable[SubstitutionDiff]], tuple[SubstitutionDiff, ...]],
) -> Filterable:
    def day(d: ScheduleDay) -> ScheduleDay:
        return d.model_copy(update={"substitutions": keep(d.substitutions)})

    def day_diff(d: DayDiff) -> DayDiff:
        return DayDiff(
            date=d.date,
            date_string=d.date_string,
            new_substitutions=keep(d.new_substitutions),
            edited_substitutions=keep_diffs(d.edited_substitutions),
            removed_substitutions=keep(d.removed_substitutions),
            new_messages=d.new_messages,
            removed_messages=d.removed_messages,
        )

    if isinstance(target, ScheduleDay):
        return day(target)
    if isinstance(target, DayDiff):
        return day_diff(target)
    if isinstance(target, Schedule):
        return target.model_copy(update={"days": tuple(day(d) for d in target.days)})
    if isinstance(target, ScheduleDiff):
        return ScheduleDiff(
            new_additional_infos=target.new_additional_infos,
            removed_additional_infos=target.removed_additional_infos,
            new_days=tuple(day(d) for d in target.new_days),
            edited_days=tuple(day_diff(d) for d in target.edited_days),
            removed_days=tuple(day(d) for d in target.removed_days),
        )
    raise TypeError(f"Nicht filterbar: {type(target).__name__}")


def filter_by_class_and_subject(target: Filterable, the_class: Optional[str],
                                excluded_subjects: Optional[set[str]] = None) -> Filterable:
    """Sicht für eine Klasse ohne die ausgeschlossenen Fächer.

    Bei einem Schedule wird zusätzlich die Klassenliste auf ``the_class``
    reduziert.
    """
    result = _project(
        target,
        lambda subs: filter_substitutions_by_subject(
            excluded_subjects, filter_substitutions_by_class(the_class, subs)),
        lambda diffs: filter_diffs_by_subject(
            excluded_subjects, filter_diffs_by_class(the_class, diffs)),
    )
    if isinstance(result, Schedule) and the_class is not None:
        result = result.model_copy(update={"classes": (the_class,)})
    return result


def filter_by_teacher_and_subject(target: Filterable, teacher: Optional[str],
                                  excluded_subjects: Optional[set[str]] = None) -> Filterable:
    """Sicht für eine Lehrkraft (neu oder vorher eingeteilt) ohne ausgeschlossene Fächer."""
    result = _project(
        target,
        lambda subs: filter_substitutions_by_subject(
            excluded_subjects, filter_substitutions_by_teacher(teacher, subs)),
        lambda diffs: filter_diffs_by_subject(
            excluded_subjects, filter_diffs_by_teacher(teacher, diffs)),
    )
    if isinstance(result, Schedule) and teacher is not None:
        result = result.model_copy(update={"teachers": (teacher,)})
    return result
