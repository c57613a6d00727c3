"""Export-Modul: Beschreibungstexte und Rich-Konsolenausgabe."""

from export.text import describe, describe_for_teacher_view, describe_diff
from export.console import print_schedule, print_schedule_diff

__all__ = [
    "describe",
    "describe_for_teacher_view",
    "describe_diff",
    "print_schedule",
    "print_schedule_diff",
]
