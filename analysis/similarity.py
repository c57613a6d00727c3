"""Ähnlichkeit zweier Vertretungen für dieselben Klassen."""

from typing import Collection, Iterable, Optional

from models.substitution import COMPARISON_FIELDS, Substitution


def similarity_score(a: Substitution, b: Substitution) -> int:
    """Anzahl übereinstimmender Vergleichsfelder (0–9)."""
    return sum(1 for name in COMPARISON_FIELDS if getattr(a, name) == getattr(b, name))


def find_similar(
    substitution: Substitution,
    candidates: Iterable[Substitution],
    excluded: Collection[Substitution] = (),
) -> Optional[Substitution]:
    """Sucht den ähnlichsten Kandidaten mit identischer Klassenmenge.

    Bei Gleichstand gewinnt der erste Kandidat in Eingabereihenfolge.
    Gibt None zurück, wenn kein Kandidat passt oder keiner auch nur ein
    Feld gemeinsam hat.
    """
    best: Optional[Substitution] = None
    best_score = 0
    for candidate in candidates:
        if candidate.classes != substitution.classes or candidate in excluded:
            continue
        score = similarity_score(candidate, substitution)
        if score > best_score:
            best, best_score = candidate, score
    return best
