"""Natürliche Sortierung ("5a" < "10a", "Stunde 2" < "Stunde 10")."""

import re

_DIGITS = re.compile(r"(\d+)")


def natural_key(value: str) -> tuple:
    """Sortierschlüssel, der Ziffernfolgen als Zahlen vergleicht.

    re.split mit Gruppe liefert abwechselnd Text und Ziffern, dadurch
    werden an jeder Position nur gleichartige Werte verglichen.
    """
    parts = _DIGITS.split(value)
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts))
