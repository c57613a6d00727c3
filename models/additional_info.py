"""Datenmodell für eine Zusatzinformation (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class AdditionalInfo(BaseModel):
    """Hinweis außerhalb der Tagespläne (z.B. Nachrichtenticker, Termine)."""

    model_config = ConfigDict(frozen=True)

    title: str
    text: str
    has_information: bool = False   # True wenn gerade dringende Infos vorliegen
