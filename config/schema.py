from pydantic import BaseModel, Field, model_validator


# ─── DIFF ───

class DiffConfig(BaseModel):
    """Einstellungen für den Vergleich zweier Schnappschüsse."""
    # Höchstzahl abweichender Felder, bei der eine Vertretung noch als
    # "geändert" gilt (sonst: entfernt + neu). 9 Felder werden verglichen.
    max_complexity: int = Field(3, ge=0, le=9,
        description="Max. abweichende Felder für 'geändert'")


# ─── TEXTAUSGABE ───

class TextConfig(BaseModel):
    """Bausteine für die einzeilige Beschreibung einer Vertretung."""
    # Markierung eingefügter Textstellen im Diff, z.B. <ins>…</ins>
    insert_tag: str = Field("ins", description="Tag für eingefügten Text")
    # Markierung gelöschter Textstellen im Diff, z.B. <del>…</del>
    delete_tag: str = Field("del", description="Tag für gelöschten Text")
    # "Deutsch statt Mathe"
    instead_word: str = Field("statt", description="Verbindungswort alt → neu")
    # "Deutsch (KW) in 224"
    room_connector: str = Field(" in ", description="Verbindung zum Raum")
    # "224 – fällt aus"
    desc_connector: str = Field(" – ", description="Verbindung zur Beschreibung")

    @model_validator(mode='after')
    def validate_tags(self):
        """Tags müssen alphanumerisch und voneinander verschieden sein."""
        for tag in (self.insert_tag, self.delete_tag):
            if not tag.isalnum():
                raise ValueError(f"Ungültiger Tag-Name: {tag!r}")
        if self.insert_tag == self.delete_tag:
            raise ValueError("insert_tag und delete_tag müssen verschieden sein")
        return self


# ─── GESAMT ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration (wird als YAML gespeichert)."""
    diff: DiffConfig = Field(default_factory=DiffConfig)
    text: TextConfig = Field(default_factory=TextConfig)
    # Log-Level für die Kommandozeile (DEBUG, INFO, WARNING, ERROR)
    log_level: str = Field("WARNING", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
