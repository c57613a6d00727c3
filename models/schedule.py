"""Schedule: Vollständiger Vertretungsplan einer Schule (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from models.additional_info import AdditionalInfo
from models.natural_order import natural_key
from models.schedule_day import LAST_CHANGE_FORMAT, ScheduleDay


class ScheduleType(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


def day_sort_key(day: ScheduleDay) -> tuple:
    """Tage mit Datum zuerst (chronologisch), dann Tage mit Datumstext
    (natürliche Sortierung), zuletzt Tage ohne jede Datumsangabe."""
    if day.date is not None:
        return (0, day.date.toordinal(), ())
    if day.date_string is not None:
        return (1, 0, natural_key(day.date_string))
    return (2, 0, ())


def fold_day(days: Iterable[ScheduleDay], new_day: ScheduleDay) -> tuple[ScheduleDay, ...]:
    """Führt ``new_day`` mit dem Tag gleichen Datums zusammen oder hängt ihn an."""
    days = list(days)
    for i, day in enumerate(days):
        if day.same_date_as(new_day):
            days[i] = day.merged_with(new_day)
            break
    else:
        days.append(new_day)
    return tuple(days)


class Schedule(BaseModel):
    """Vertretungsplan: Tage, Zusatzinfos und bekannte Klassen/Lehrkräfte."""

    model_config = ConfigDict(frozen=True)

    type: ScheduleType = ScheduleType.STUDENT
    last_change: Optional[datetime] = None
    last_change_string: Optional[str] = None
    website: Optional[str] = None
    days: tuple[ScheduleDay, ...] = ()
    additional_infos: tuple[AdditionalInfo, ...] = ()
    classes: tuple[str, ...] = ()
    teachers: tuple[str, ...] = ()

    @field_validator("days", mode="after")
    @classmethod
    def _merge_and_sort_days(cls, v: tuple[ScheduleDay, ...]) -> tuple[ScheduleDay, ...]:
        days: tuple[ScheduleDay, ...] = ()
        for day in v:
            days = fold_day(days, day)
        return tuple(sorted(days, key=day_sort_key))

    # ─── Aufbau ───

    def with_day(self, new_day: ScheduleDay) -> "Schedule":
        """Fügt einen Tag hinzu oder führt ihn mit dem Tag gleichen Datums zusammen.

        Ohne eigenen Änderungszeitpunkt übernimmt der Plan den des Tages;
        ein späterer Zeitpunkt des Tages schreibt ihn fort.
        """
        last_change = self.last_change
        last_change_string = self.last_change_string
        if last_change is None and last_change_string is None:
            if new_day.last_change is not None:
                last_change = new_day.last_change
            elif new_day.last_change_string is not None:
                last_change_string = new_day.last_change_string
        elif (
            last_change is not None
            and new_day.last_change is not None
            and new_day.last_change > last_change
        ):
            last_change = new_day.last_change

        days = fold_day(self.days, new_day)
        return self.model_copy(update={
            "last_change": last_change,
            "last_change_string": last_change_string,
            "days": tuple(sorted(days, key=day_sort_key)),
        })

    def with_days(self, days: Iterable[ScheduleDay]) -> "Schedule":
        schedule = self
        for day in days:
            schedule = schedule.with_day(day)
        return schedule

    def with_additional_info(self, info: AdditionalInfo) -> "Schedule":
        return self.model_copy(
            update={"additional_infos": self.additional_infos + (info,)}
        )

    # ─── Anzeige ───

    def display_last_change(self) -> Optional[str]:
        if self.last_change_string is not None:
            return self.last_change_string
        if self.last_change is not None:
            return self.last_change.strftime(LAST_CHANGE_FORMAT)
        return None

    def to_text(self) -> str:
        """Mehrzeilige Darstellung des ganzen Plans (Debug-Ausgabe)."""
        lines = [
            "--------------------",
            "Vertretungsplan",
            "--------------------",
            "",
            f"Typ: {self.type.value}",
            f"Stand: {self.display_last_change()}",
            f"Website: {self.website}",
        ]
        if self.classes:
            lines.append(f"Klassen: {', '.join(self.classes)}")
        if self.teachers:
            lines.append(f"Lehrkräfte: {', '.join(self.teachers)}")
        lines += ["", ""]
        for day in self.days:
            lines.append(day.to_text(self.type))
        if self.additional_infos:
            lines += ["Zusatzinfos", "-----------", ""]
            for info in self.additional_infos:
                lines += [info.title, info.text, ""]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_text()

    # ─── Laden ───

    @classmethod
    def load_json(cls, path: Path) -> "Schedule":
        """Lädt einen Plan-Schnappschuss aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
