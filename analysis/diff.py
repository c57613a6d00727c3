"""Vergleich zweier Vertretungsplan-Schnappschüsse (Diff / Changelog).

Gibt strukturierte Unterschiede zurück, die als Rich-Ausgabe oder JSON
ausgegeben werden können. Drei Ebenen:

- SubstitutionDiff: eine Vertretung alt ↔ neu (gleiche Klassen)
- DayDiff:          ein Tag alt ↔ derselbe Tag neu
- ScheduleDiff:     ganzer Plan alt ↔ neu, inkl. Zusatzinfos
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from analysis.similarity import find_similar
from models.additional_info import AdditionalInfo
from models.schedule import Schedule
from models.schedule_day import ScheduleDay, format_day_date
from models.substitution import COMPARISON_FIELDS, Substitution

logger = logging.getLogger(__name__)

# Höchstens so viele abweichende Felder gelten noch als "geändert"
# statt als "entfernt + neu"
MAX_COMPLEXITY = 3


def _unique(items: Iterable) -> tuple:
    return tuple(dict.fromkeys(items))


def substitution_to_dict(s: Substitution) -> dict:
    """Serialisiert eine Vertretung mit sortierten Mengen und Beschreibungstext."""
    from export.text import describe

    data = s.model_dump(mode="json")
    for key in ("classes", "teachers", "previous_teachers"):
        data[key] = sorted(data[key])
    data["text"] = describe(s)
    return data


def day_to_dict(day: ScheduleDay) -> dict:
    return {
        "date": day.date.isoformat() if day.date else None,
        "date_string": day.display_date(),
        "last_change": day.display_last_change(),
        "substitutions": [substitution_to_dict(s) for s in day.substitutions],
        "messages": list(day.messages),
    }


# ─── Vertretung ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SubstitutionDiff:
    """Eine veränderte Vertretung (alte und neue Fassung, gleiche Klassen)."""

    old: Substitution
    new: Substitution

    def __post_init__(self):
        if self.old.classes != self.new.classes:
            raise ValueError(
                f"Klassen müssen gleich sein: {sorted(self.old.classes)} "
                f"≠ {sorted(self.new.classes)}"
            )

    @property
    def classes(self) -> frozenset[str]:
        return self.old.classes

    @property
    def complexity(self) -> int:
        """Anzahl der Vergleichsfelder, die sich zwischen alt und neu unterscheiden."""
        return sum(
            1 for name in COMPARISON_FIELDS
            if getattr(self.old, name) != getattr(self.new, name)
        )

    @property
    def text(self) -> str:
        """Beschreibung mit markierten Einfügungen/Löschungen."""
        from export.text import describe_diff

        return describe_diff(self)

    def to_dict(self) -> dict:
        return {
            "old": substitution_to_dict(self.old),
            "new": substitution_to_dict(self.new),
            "complexity": self.complexity,
            "text": self.text,
        }


# ─── Tag ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DayDiff:
    """Unterschiede zwischen zwei Fassungen desselben Tages."""

    date: Optional[date] = None
    date_string: Optional[str] = None
    new_substitutions: tuple[Substitution, ...] = ()
    edited_substitutions: tuple[SubstitutionDiff, ...] = ()
    removed_substitutions: tuple[Substitution, ...] = ()
    new_messages: tuple[str, ...] = ()
    removed_messages: tuple[str, ...] = ()

    @classmethod
    def compare(cls, old: ScheduleDay, new: ScheduleDay,
                max_complexity: int = MAX_COMPLEXITY) -> "DayDiff":
        return compare_day(old, new, max_complexity)

    def is_not_empty(self) -> bool:
        return bool(
            self.new_messages or self.removed_messages or self.new_substitutions
            or self.edited_substitutions or self.removed_substitutions
        )

    def is_empty(self) -> bool:
        return not self.is_not_empty()

    def display_date(self) -> Optional[str]:
        if self.date is not None:
            return format_day_date(self.date)
        return self.date_string

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat() if self.date else None,
            "date_string": self.display_date(),
            "new_substitutions": [substitution_to_dict(s) for s in self.new_substitutions],
            "edited_substitutions": [d.to_dict() for d in self.edited_substitutions],
            "removed_substitutions": [substitution_to_dict(s) for s in self.removed_substitutions],
            "new_messages": list(self.new_messages),
            "removed_messages": list(self.removed_messages),
        }


def compare_day(old: ScheduleDay, new: ScheduleDay,
                max_complexity: int = MAX_COMPLEXITY) -> DayDiff:
    """Vergleicht zwei Fassungen desselben Tages.

    Für jede neue Vertretung wird der erste passende Fall genommen:
    1. exakt gleich einer noch offenen alten Vertretung → unverändert
    2. gleich bis auf die Klassen → hinzugekommene/weggefallene Klassen
       werden als neue bzw. entfernte Teil-Vertretung gemeldet
    3. ähnlichste alte Vertretung mit Komplexität ≤ max_complexity → geändert
    4. sonst → neu
    Alte Vertretungen, die danach noch offen sind, gelten als entfernt.

    Raises:
        ValueError: wenn die Tage nicht dasselbe Datum haben.
    """
    if not old.same_date_as(new):
        raise ValueError(
            f"Tage haben unterschiedliche Daten: "
            f"{old.display_date()!r} / {new.display_date()!r}"
        )

    new_messages = [m for m in new.messages if m not in old.messages]
    removed_messages = [m for m in old.messages if m not in new.messages]

    new_substitutions: list[Substitution] = []
    edited_substitutions: list[SubstitutionDiff] = []
    removed_substitutions: list[Substitution] = []

    # bereits zugeordnete alte Vertretungen
    handled: set[Substitution] = set()

    for n in new.substitutions:
        if n in old.substitutions and n not in handled:
            handled.add(n)
            continue

        o = next(
            (s for s in old.substitutions if s not in handled and s.equals_excluding_classes(n)),
            None,
        )
        if o is not None:
            added_classes = n.classes - o.classes
            removed_classes = o.classes - n.classes
            if added_classes:
                new_substitutions.append(n.with_classes(added_classes))
            if removed_classes:
                removed_substitutions.append(n.with_classes(removed_classes))
            logger.debug(
                f"Klassen geändert: +{sorted(added_classes)} -{sorted(removed_classes)} ({n})"
            )
            handled.add(o)
            continue

        o = find_similar(n, old.substitutions, handled)
        if o is not None:
            substitution_diff = SubstitutionDiff(o, n)
            if substitution_diff.complexity <= max_complexity:
                edited_substitutions.append(substitution_diff)
                handled.add(o)
                continue
            logger.debug(
                f"Zu viele Abweichungen ({substitution_diff.complexity} > {max_complexity}), "
                f"gilt als neu: {n}"
            )

        new_substitutions.append(n)

    removed_substitutions.extend(s for s in old.substitutions if s not in handled)

    diff = DayDiff(
        date=old.date,
        date_string=old.date_string,
        new_substitutions=_unique(new_substitutions),
        edited_substitutions=_unique(edited_substitutions),
        removed_substitutions=_unique(removed_substitutions),
        new_messages=tuple(new_messages),
        removed_messages=tuple(removed_messages),
    )
    logger.info(
        f"Tag {diff.display_date()}: {len(diff.new_substitutions)} neu, "
        f"{len(diff.edited_substitutions)} geändert, "
        f"{len(diff.removed_substitutions)} entfernt"
    )
    return diff


# ─── Plan ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScheduleDiff:
    """Vollständiger Diff zwischen zwei Vertretungsplan-Schnappschüssen."""

    new_additional_infos: tuple[AdditionalInfo, ...] = ()
    removed_additional_infos: tuple[AdditionalInfo, ...] = ()
    new_days: tuple[ScheduleDay, ...] = ()
    edited_days: tuple[DayDiff, ...] = ()
    removed_days: tuple[ScheduleDay, ...] = ()

    @classmethod
    def compare(cls, old: Schedule, new: Schedule,
                max_complexity: int = MAX_COMPLEXITY) -> "ScheduleDiff":
        return compare_schedule(old, new, max_complexity)

    def is_empty(self) -> bool:
        """Gibt True zurück wenn kein Unterschied gefunden wurde."""
        return (
            not self.new_additional_infos
            and not self.removed_additional_infos
            and not self.new_days
            and not self.removed_days
            and all(d.is_empty() for d in self.edited_days)
        )

    def to_dict(self) -> dict:
        """Serialisiert den Diff als Dictionary (für JSON-Ausgabe)."""
        return {
            "new_additional_infos": [i.model_dump(mode="json") for i in self.new_additional_infos],
            "removed_additional_infos": [
                i.model_dump(mode="json") for i in self.removed_additional_infos
            ],
            "new_days": [day_to_dict(d) for d in self.new_days],
            "edited_days": [d.to_dict() for d in self.edited_days],
            "removed_days": [day_to_dict(d) for d in self.removed_days],
        }

    def to_json(self, indent: int = 2) -> str:
        """Gibt den Diff als JSON-String zurück."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def _find_same_date_day(day: ScheduleDay, days: Iterable[ScheduleDay]) -> Optional[ScheduleDay]:
    return next((d for d in days if d.same_date_as(day)), None)


def compare_schedule(old: Schedule, new: Schedule,
                     max_complexity: int = MAX_COMPLEXITY) -> ScheduleDiff:
    """Vergleicht zwei Schnappschüsse desselben Vertretungsplans.

    Args:
        old: Älterer Schnappschuss (z.B. gespeichert).
        new: Neuerer Schnappschuss (z.B. frisch abgerufen).
        max_complexity: Schwelle für "geändert" statt "entfernt + neu".

    Returns:
        ScheduleDiff mit allen gefundenen Unterschieden.
    """
    new_infos = tuple(i for i in new.additional_infos if i not in old.additional_infos)
    removed_infos = tuple(i for i in old.additional_infos if i not in new.additional_infos)

    new_days: list[ScheduleDay] = []
    edited_days: list[DayDiff] = []
    for new_day in new.days:
        old_day = _find_same_date_day(new_day, old.days)
        if old_day is None:
            new_days.append(new_day)
            continue
        day_diff = compare_day(old_day, new_day, max_complexity)
        if day_diff.is_not_empty():
            edited_days.append(day_diff)

    removed_days = [d for d in old.days if _find_same_date_day(d, new.days) is None]

    diff = ScheduleDiff(
        new_additional_infos=new_infos,
        removed_additional_infos=removed_infos,
        new_days=tuple(new_days),
        edited_days=tuple(edited_days),
        removed_days=tuple(removed_days),
    )
    logger.info(
        f"Plan-Vergleich: {len(diff.new_days)} Tage neu, {len(diff.edited_days)} geändert, "
        f"{len(diff.removed_days)} entfernt, {len(new_infos)}/{len(removed_infos)} "
        f"Zusatzinfos neu/entfernt"
    )
    return diff
