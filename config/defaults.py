from config.schema import DiffConfig, EngineConfig, TextConfig


def default_diff_config() -> DiffConfig:
    """Standard: bis zu 3 abweichende Felder gelten als Änderung."""
    return DiffConfig(max_complexity=3)


def default_text_config() -> TextConfig:
    """Deutsche Standardtexte: "Deutsch (KW) statt Mathe (ER) in 224 – Text".

    Änderungen im Diff werden als <ins>…</ins> / <del>…</del> markiert.
    """
    return TextConfig(
        insert_tag="ins",
        delete_tag="del",
        instead_word="statt",
        room_connector=" in ",
        desc_connector=" – ",
    )


def default_engine_config() -> EngineConfig:
    """Vollständige Default-Konfiguration."""
    return EngineConfig(
        diff=default_diff_config(),
        text=default_text_config(),
        log_level="WARNING",
    )
