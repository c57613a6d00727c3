"""Zusammenführen gleichartiger Vertretungen und Tage.

Viele Quellformate liefern eine Zeile pro Klasse (oder pro Lehrkraft bei
Team-Teaching). Gleiche Vertretungen werden hier zu einem Eintrag mit
Klassen- bzw. Lehrermenge gefaltet. Alle Funktionen liefern neue Werte
zurück, die Eingaben bleiben unverändert.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from models.schedule_day import ScheduleDay
from models.substitution import Substitution

logger = logging.getLogger(__name__)


class MergeRule(str, Enum):
    """Welche Menge beim Zusammenführen vereinigt wird."""

    CLASSES = "classes"
    TEACHERS = "teachers"
    PREVIOUS_TEACHERS = "previous_teachers"


def matching_rule(existing: Substitution, new: Substitution) -> Optional[MergeRule]:
    """Prüft die Regeln in fester Reihenfolge: Klassen, Lehrer, vorherige Lehrer."""
    if existing.equals_excluding_classes(new):
        return MergeRule.CLASSES
    if existing.equals_excluding_teachers(new):
        return MergeRule.TEACHERS
    if existing.equals_excluding_previous_teachers(new):
        return MergeRule.PREVIOUS_TEACHERS
    return None


def apply_rule(existing: Substitution, new: Substitution, rule: MergeRule) -> Substitution:
    """Vereinigt die von ``rule`` benannte Menge von ``new`` in ``existing``."""
    if rule is MergeRule.CLASSES:
        return existing.with_classes(existing.classes | new.classes)
    if rule is MergeRule.TEACHERS:
        return existing.with_teachers(existing.teachers | new.teachers)
    return existing.with_previous_teachers(existing.previous_teachers | new.previous_teachers)


def merge_substitution(
    substitutions: tuple[Substitution, ...], substitution: Substitution
) -> tuple[Substitution, ...]:
    """Fügt eine Vertretung in eine Folge ein und führt sie ggf. zusammen.

    Der erste passende Eintrag gewinnt und wird an seiner Position ersetzt;
    passt keiner, wird die Vertretung angehängt.
    """
    for i, existing in enumerate(substitutions):
        rule = matching_rule(existing, substitution)
        if rule is None:
            continue
        merged = apply_rule(existing, substitution, rule)
        logger.debug(f"Zusammengeführt ({rule.value}): {merged}")
        rest = tuple(s for s in substitutions[i + 1:] if s != merged)
        return substitutions[:i] + (merged,) + rest
    return substitutions + (substitution,)


def merge_substitutions(substitutions: Iterable[Substitution]) -> tuple[Substitution, ...]:
    """Faltet beliebig viele Vertretungen zu einer duplikatfreien Folge."""
    result: tuple[Substitution, ...] = ()
    for s in substitutions:
        result = merge_substitution(result, s)
    return result


def merge_substitution_into_day(day: ScheduleDay, substitution: Substitution) -> ScheduleDay:
    """Neuer Tag, in dem ``substitution`` nach der Zusammenführungsregel ergänzt ist."""
    return day.model_copy(
        update={"substitutions": merge_substitution(day.substitutions, substitution)}
    )


def merge_days(day: ScheduleDay, other: ScheduleDay) -> ScheduleDay:
    """Führt zwei Einträge für dasselbe Datum zusammen.

    Nachrichten werden vereinigt (Reihenfolge bleibt), Vertretungen über die
    Zusammenführungsregel ergänzt, der Änderungszeitpunkt auf den späteren
    der beiden gesetzt.
    """
    if not day.same_date_as(other):
        raise ValueError(
            f"Tage mit unterschiedlichen Daten können nicht zusammengeführt werden: "
            f"{day.display_date()!r} / {other.display_date()!r}"
        )

    substitutions = day.substitutions
    for s in other.substitutions:
        substitutions = merge_substitution(substitutions, s)

    messages = list(day.messages)
    for message in other.messages:
        if message not in messages:
            messages.append(message)

    last_change = day.last_change
    if other.last_change is not None and (last_change is None or other.last_change > last_change):
        last_change = other.last_change

    return day.model_copy(update={
        "substitutions": substitutions,
        "messages": tuple(messages),
        "last_change": last_change,
        "last_change_string": day.last_change_string or other.last_change_string,
    })
