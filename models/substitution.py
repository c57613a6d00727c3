"""Datenmodell für eine einzelne Vertretung (Pydantic v2)."""

import re
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Leere Werte, Leerzeichen und Platzhalter wie "---" gelten als "keine Angabe"
_NO_DATA = re.compile(r"[\s\-]*")

# Felder, die Ähnlichkeit und Komplexität zweier Vertretungen bestimmen
COMPARISON_FIELDS: tuple[str, ...] = (
    "lesson",
    "type",
    "subject",
    "previous_subject",
    "teacher",
    "previous_teacher",
    "room",
    "previous_room",
    "desc",
)


def has_data(value: Optional[str]) -> bool:
    """True wenn der Wert echten Inhalt hat (nicht None, leer oder "---")."""
    return value is not None and _NO_DATA.fullmatch(value) is None


class Substitution(BaseModel):
    """Eine Änderung für eine Unterrichtsstunde, ggf. für mehrere Klassen/Lehrer."""

    model_config = ConfigDict(frozen=True)

    classes: frozenset[str] = frozenset()
    lesson: Optional[str] = None              # "6" oder "5-6"
    type: Optional[str] = None                # "Entfall", "Vertretung", ...
    subject: Optional[str] = None
    previous_subject: Optional[str] = None
    teachers: frozenset[str] = frozenset()    # Kürzel ("KW", "ER")
    previous_teachers: frozenset[str] = frozenset()
    room: Optional[str] = None
    previous_room: Optional[str] = None
    desc: Optional[str] = None
    color: Optional[str] = None               # wird außerhalb je Art vergeben
    substitution_from: Optional[str] = None   # Verlegung: "Vertretung von ..."
    teacher_to: Optional[str] = None          # Verlegung: "Lehrer nach ..."

    @field_validator(
        "lesson", "type", "subject", "previous_subject", "room",
        "previous_room", "desc", "color", "substitution_from", "teacher_to",
        mode="before",
    )
    @classmethod
    def _normalize_placeholder(cls, v):
        if isinstance(v, str) and not has_data(v):
            return None
        return v

    @field_validator("classes", "teachers", "previous_teachers", mode="before")
    @classmethod
    def _normalize_names(cls, v):
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(name for name in v if has_data(name))

    # ─── Abgeleitete Texte ───

    @property
    def teacher(self) -> Optional[str]:
        """Lehrkräfte als Text ("ER, KW"), None wenn keine angegeben."""
        return ", ".join(sorted(self.teachers)) or None

    @property
    def previous_teacher(self) -> Optional[str]:
        return ", ".join(sorted(self.previous_teachers)) or None

    # ─── Kopien ───

    def with_classes(self, classes: Iterable[str]) -> "Substitution":
        """Kopie mit anderer Klassenmenge, alle übrigen Felder unverändert."""
        return self.model_copy(update={"classes": frozenset(classes)})

    def with_teachers(self, teachers: Iterable[str]) -> "Substitution":
        return self.model_copy(update={"teachers": frozenset(teachers)})

    def with_previous_teachers(self, teachers: Iterable[str]) -> "Substitution":
        return self.model_copy(update={"previous_teachers": frozenset(teachers)})

    # ─── Vergleiche ───

    def _fields_excluding(self, excluded: str) -> dict:
        return self.model_dump(exclude={excluded})

    def equals_excluding_classes(self, other: "Substitution") -> bool:
        """Gleich in allen Feldern außer der Klassenmenge."""
        return self._fields_excluding("classes") == other._fields_excluding("classes")

    def equals_excluding_teachers(self, other: "Substitution") -> bool:
        return self._fields_excluding("teachers") == other._fields_excluding("teachers")

    def equals_excluding_previous_teachers(self, other: "Substitution") -> bool:
        return (
            self._fields_excluding("previous_teachers")
            == other._fields_excluding("previous_teachers")
        )

    def __str__(self) -> str:
        return self.to_text()

    def to_text(self, teacher_view: bool = False) -> str:
        """Einzeilige Darstellung für Konsolenausgabe (Lehrer- oder Schülersicht)."""
        from export.text import describe, describe_for_teacher_view, join_classes, join_teachers

        if teacher_view:
            parts = (join_teachers(self.teachers | self.previous_teachers), self.type,
                     describe_for_teacher_view(self))
        else:
            parts = (join_classes(self.classes), self.type, describe(self))
        return " ".join(p for p in parts if p)
