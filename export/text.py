"""Einzeilige Beschreibungstexte für Vertretungen und Vertretungs-Diffs.

Eine Beschreibung besteht aus bis zu drei Teilen, in fester Reihenfolge:

    "Fach (Lehrer) statt Fach (Lehrer)" · "Raum" · "Beschreibung"
    → "Deu (KW) statt Mat (ER) in 224 – fällt aus"

Leere Teile fallen samt Verbindungstext weg. Im Diff wird jeder Teil
zwischen alter und neuer Fassung verglichen und eingefügter bzw.
gelöschter Text mit <ins>…</ins> / <del>…</del> markiert.
"""

import html
import re
from difflib import SequenceMatcher
from enum import Enum
from typing import Iterable, Optional, TYPE_CHECKING

from config.schema import TextConfig
from models.natural_order import natural_key
from models.substitution import Substitution, has_data

if TYPE_CHECKING:
    from analysis.diff import SubstitutionDiff

_DEFAULT_TEXT_CONFIG = TextConfig()

# "10a" → ("10", "a"); Klassen mit gleichem Präfix werden zusammengezogen
_CLASS_PREFIX = re.compile(r"^(.*\d+)(\w+)$")

__all__ = [
    "MissingCaseError",
    "Presence",
    "presence",
    "has_data",
    "describe",
    "describe_for_teacher_view",
    "describe_diff",
    "get_teachers",
    "join_classes",
    "join_teachers",
]


class MissingCaseError(RuntimeError):
    """Eine Kombination der Entscheidungstabelle wurde nicht behandelt."""


class Presence(Enum):
    """Belegung eines Feldpaars (aktueller Wert, vorheriger Wert)."""

    DIFFERENT = "different"           # beide vorhanden, verschieden
    SAME = "same"                     # beide vorhanden, gleich
    ONLY_CURRENT = "only_current"
    ONLY_PREVIOUS = "only_previous"
    NONE = "none"


def presence(current: Optional[str], previous: Optional[str]) -> Presence:
    if has_data(current) and has_data(previous):
        return Presence.SAME if current == previous else Presence.DIFFERENT
    if has_data(current):
        return Presence.ONLY_CURRENT
    if has_data(previous):
        return Presence.ONLY_PREVIOUS
    return Presence.NONE


# ─── Namenslisten ─────────────────────────────────────────────────────────────

def join_classes(classes: Iterable[str]) -> str:
    """Fasst Klassen gleichen Jahrgangs zusammen: {"5a","5b","6c"} → "5ab, 6c"."""
    parts: list[str] = []
    prefix: Optional[str] = None
    for name in sorted(classes, key=natural_key):
        match = _CLASS_PREFIX.match(name)
        if parts and match and match.group(1) == prefix:
            parts[-1] += match.group(2)
            continue
        parts.append(name)
        prefix = match.group(1) if match else None
    return ", ".join(parts)


def join_teachers(teachers: Iterable[str]) -> str:
    return ", ".join(sorted(teachers))


# ─── Entscheidungstabellen ────────────────────────────────────────────────────

def _pair(current: Optional[str], previous: Optional[str], cfg: TextConfig) -> str:
    """"neu statt alt", nur einer der beiden, oder leer."""
    match presence(current, previous):
        case Presence.DIFFERENT:
            return f"{current} {cfg.instead_word} {previous}"
        case Presence.SAME | Presence.ONLY_CURRENT:
            return current
        case Presence.ONLY_PREVIOUS:
            return previous
        case Presence.NONE:
            return ""
    raise MissingCaseError(f"Feldpaar {current!r} / {previous!r}")


def _subject_with_teacher(subject: str, teacher: Optional[str], previous_teacher: Optional[str],
                          cfg: TextConfig) -> str:
    match presence(teacher, previous_teacher):
        case Presence.DIFFERENT:
            return f"{subject} ({teacher} {cfg.instead_word} {previous_teacher})"
        case Presence.SAME | Presence.ONLY_CURRENT:
            return f"{subject} ({teacher})"
        case Presence.ONLY_PREVIOUS:
            return f"{subject} ({previous_teacher})"
        case Presence.NONE:
            return subject
    raise MissingCaseError(f"Lehrer {teacher!r} / {previous_teacher!r}")


def _changed_subject_with_teacher(subject: str, previous_subject: str, teacher: Optional[str],
                                  previous_teacher: Optional[str], cfg: TextConfig) -> str:
    instead = cfg.instead_word
    match presence(teacher, previous_teacher):
        case Presence.DIFFERENT:
            return f"{subject} ({teacher}) {instead} {previous_subject} ({previous_teacher})"
        case Presence.SAME | Presence.ONLY_CURRENT:
            return f"{subject} {instead} {previous_subject} ({teacher})"
        case Presence.ONLY_PREVIOUS:
            return f"{subject} {instead} {previous_subject} ({previous_teacher})"
        case Presence.NONE:
            return f"{subject} {instead} {previous_subject}"
    raise MissingCaseError(f"Lehrer {teacher!r} / {previous_teacher!r}")


def _subject_and_teacher(subject: Optional[str], previous_subject: Optional[str],
                         teacher: Optional[str], previous_teacher: Optional[str],
                         cfg: TextConfig) -> str:
    match presence(subject, previous_subject):
        case Presence.DIFFERENT:
            return _changed_subject_with_teacher(
                subject, previous_subject, teacher, previous_teacher, cfg)
        case Presence.SAME | Presence.ONLY_CURRENT:
            return _subject_with_teacher(subject, teacher, previous_teacher, cfg)
        case Presence.ONLY_PREVIOUS:
            return _subject_with_teacher(previous_subject, teacher, previous_teacher, cfg)
        case Presence.NONE:
            return _pair(teacher, previous_teacher, cfg)
    raise MissingCaseError(f"Fach {subject!r} / {previous_subject!r}")


def _subject_and_teacher_of(s: Substitution, cfg: TextConfig) -> str:
    return _subject_and_teacher(s.subject, s.previous_subject, s.teacher, s.previous_teacher, cfg)


def _subject_and_class_of(s: Substitution, cfg: TextConfig) -> str:
    # Lehreransicht: an die Stelle der Lehrkräfte treten die Klassen
    classes = join_classes(s.classes)
    return _subject_and_teacher(s.subject, s.previous_subject, classes, classes, cfg)


def _room_of(s: Substitution, cfg: TextConfig) -> str:
    return _pair(s.room, s.previous_room, cfg)


def _desc_of(s: Substitution) -> str:
    return s.desc if has_data(s.desc) else ""


def _format_output(subject_and_teacher: str, room: str, desc: str, cfg: TextConfig) -> str:
    """Verbindet die nicht-leeren Teile: "A in B – C", "A in B", "B – C", "A – C", ..."""
    head = cfg.room_connector.join(p for p in (subject_and_teacher, room) if p)
    return cfg.desc_connector.join(p for p in (head, desc) if p)


# ─── Öffentliche Texte ────────────────────────────────────────────────────────

def get_teachers(s: Substitution, config: Optional[TextConfig] = None) -> str:
    """Lehrkräfte als Text: "B statt A", "B", "A" oder leer."""
    return _pair(s.teacher, s.previous_teacher, config or _DEFAULT_TEXT_CONFIG)


def describe(s: Substitution, config: Optional[TextConfig] = None) -> str:
    """Beschreibung einer Vertretung (ohne Art und Stunde), Schüleransicht."""
    cfg = config or _DEFAULT_TEXT_CONFIG
    return _format_output(_subject_and_teacher_of(s, cfg), _room_of(s, cfg), _desc_of(s), cfg)


def describe_for_teacher_view(s: Substitution, config: Optional[TextConfig] = None) -> str:
    """Wie describe(), aber mit den Klassen statt der Lehrkräfte."""
    cfg = config or _DEFAULT_TEXT_CONFIG
    return _format_output(_subject_and_class_of(s, cfg), _room_of(s, cfg), _desc_of(s), cfg)


# ─── Diff-Texte ───────────────────────────────────────────────────────────────

def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def _mark(tag: str, text: str) -> str:
    return f"<{tag}>{_escape(text)}</{tag}>"


def _one_sided_diff(old: Optional[str], new: Optional[str], cfg: TextConfig) -> str:
    if has_data(old):
        return _mark(cfg.delete_tag, old)
    if has_data(new):
        return _mark(cfg.insert_tag, new)
    return ""


def _text_diff(old: Optional[str], new: Optional[str], cfg: TextConfig) -> str:
    """Zeichenweiser Vergleich, gelöschte/eingefügte Stellen werden markiert."""
    if not (has_data(old) and has_data(new)):
        return _one_sided_diff(old, new, cfg)

    parts: list[str] = []
    matcher = SequenceMatcher(None, old, new, autojunk=False)
    for op, i1, i2, j1, j2 in matcher.get_opcodes():
        if op == "equal":
            parts.append(_escape(old[i1:i2]))
        elif op == "delete":
            parts.append(_mark(cfg.delete_tag, old[i1:i2]))
        elif op == "insert":
            parts.append(_mark(cfg.insert_tag, new[j1:j2]))
        elif op == "replace":
            parts.append(_mark(cfg.delete_tag, old[i1:i2]))
            parts.append(_mark(cfg.insert_tag, new[j1:j2]))
        else:
            raise MissingCaseError(f"Unbekannte Diff-Operation: {op}")
    return "".join(parts)


def describe_diff(diff: "SubstitutionDiff", config: Optional[TextConfig] = None) -> str:
    """Beschreibung einer geänderten Vertretung mit markierten Änderungen.

    Sind alte und neue Fassung identisch, entspricht der Text genau
    describe(diff.new), sonst wird der Text immer escaped.
    """
    cfg = config or _DEFAULT_TEXT_CONFIG
    old, new = diff.old, diff.new
    if old == new:
        return describe(new, cfg)
    return _format_output(
        _text_diff(_subject_and_teacher_of(old, cfg), _subject_and_teacher_of(new, cfg), cfg),
        _text_diff(_room_of(old, cfg), _room_of(new, cfg), cfg),
        _text_diff(old.desc, new.desc, cfg),
        cfg,
    )
