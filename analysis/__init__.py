"""Analyse-Modul: Zusammenführen, Ähnlichkeit, Diff und gefilterte Sichten."""

from analysis.merge import merge_substitution_into_day, merge_substitutions, merge_days
from analysis.similarity import similarity_score, find_similar
from analysis.diff import (
    MAX_COMPLEXITY,
    SubstitutionDiff,
    DayDiff,
    ScheduleDiff,
    compare_day,
    compare_schedule,
)
from analysis.filters import filter_by_class_and_subject, filter_by_teacher_and_subject

__all__ = [
    "merge_substitution_into_day",
    "merge_substitutions",
    "merge_days",
    "similarity_score",
    "find_similar",
    "MAX_COMPLEXITY",
    "SubstitutionDiff",
    "DayDiff",
    "ScheduleDiff",
    "compare_day",
    "compare_schedule",
    "filter_by_class_and_subject",
    "filter_by_teacher_and_subject",
]
