"""Datenmodell für einen Tag des Vertretungsplans (Pydantic v2)."""

import datetime as dt
from typing import Iterable, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from models.natural_order import natural_key
from models.substitution import Substitution

if TYPE_CHECKING:
    from models.schedule import ScheduleType

WEEKDAY_NAMES = ("Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag")
LAST_CHANGE_FORMAT = "%d.%m.%Y %H:%M"


def format_day_date(value: dt.date) -> str:
    """Formatiert ein Datum wie "Montag, 19.10.2026"."""
    return f"{WEEKDAY_NAMES[value.weekday()]}, {value.strftime('%d.%m.%Y')}"


class ScheduleDay(BaseModel):
    """Ein Tag auf dem Vertretungsplan mit Vertretungen und Nachrichten.

    Ist das Datum nicht parsebar, wird nur ``date_string`` gesetzt.
    Vertretungen werden beim Erzeugen über die Zusammenführungsregel
    gefaltet (gleiche Vertretung für mehrere Klassen → ein Eintrag).
    """

    model_config = ConfigDict(frozen=True)

    date: Optional[dt.date] = None
    date_string: Optional[str] = None
    last_change: Optional[dt.datetime] = None
    last_change_string: Optional[str] = None
    substitutions: tuple[Substitution, ...] = ()
    messages: tuple[str, ...] = ()

    @field_validator("substitutions", mode="after")
    @classmethod
    def _merge_substitutions(cls, v: tuple[Substitution, ...]) -> tuple[Substitution, ...]:
        from analysis.merge import merge_substitutions

        return merge_substitutions(v)

    # ─── Anzeige ───

    def display_date(self) -> Optional[str]:
        """Datum als Text; ohne geparstes Datum der Originaltext."""
        if self.date is not None:
            return format_day_date(self.date)
        return self.date_string

    def display_last_change(self) -> Optional[str]:
        if self.last_change is not None:
            return self.last_change.strftime(LAST_CHANGE_FORMAT)
        return self.last_change_string

    def same_date_as(self, other: "ScheduleDay") -> bool:
        """True wenn beide Tage dasselbe Datum haben (auch nur als Text)."""
        if self.date is not None and other.date is not None:
            return self.date == other.date
        return self.display_date() == other.display_date()

    # ─── Aufbau ───

    def with_substitution(self, substitution: Substitution) -> "ScheduleDay":
        """Neuer Tag mit zusätzlicher Vertretung (Zusammenführung inklusive)."""
        from analysis.merge import merge_substitution_into_day

        return merge_substitution_into_day(self, substitution)

    def with_substitutions(self, substitutions: Iterable[Substitution]) -> "ScheduleDay":
        day = self
        for s in substitutions:
            day = day.with_substitution(s)
        return day

    def with_message(self, message: str) -> "ScheduleDay":
        if message in self.messages:
            return self
        return self.model_copy(update={"messages": self.messages + (message,)})

    def merged_with(self, other: "ScheduleDay") -> "ScheduleDay":
        """Führt zwei Einträge für dasselbe Datum zusammen."""
        from analysis.merge import merge_days

        return merge_days(self, other)

    # ─── Textausgabe ───

    def to_text(self, schedule_type: Optional["ScheduleType"] = None) -> str:
        """Mehrzeilige Darstellung für Debug-Ausgaben auf der Konsole."""
        from models.schedule import ScheduleType

        teacher_view = schedule_type == ScheduleType.TEACHER
        lines = [
            str(self.display_date()),
            "----------------------",
            "",
            f"Stand: {self.display_last_change()}",
            "",
        ]
        for s in sorted(self.substitutions, key=lambda s: natural_key(s.lesson or "")):
            lines.append(s.to_text(teacher_view=teacher_view))
        lines.append("")
        lines.extend(self.messages)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_text()
