"""Vertretungsplan-Diff — Haupt-CLI.

Verwendung:
  python main.py show <plan.json>                 Plan anzeigen
  python main.py show <plan.json> --klasse 7b     nur eine Klasse
  python main.py diff <alt.json> <neu.json>       Änderungen anzeigen
  python main.py diff <alt.json> <neu.json> --json
  python main.py config init                      Default-Konfiguration anlegen
  python main.py config show                      Konfiguration anzeigen

Schnappschüsse sind JSON-Dateien im Format von ``Schedule.model_dump_json()``.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich import box

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_abort(path: Optional[str]):
    """Lädt die Konfiguration (oder Defaults) oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        if path:
            return mgr.load(Path(path))
        return mgr.load_or_default()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def _load_schedule_or_abort(path: str):
    from pydantic import ValidationError
    from models.schedule import Schedule
    try:
        return Schedule.load_json(Path(path))
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Ungültiger Schnappschuss: {escape(path)}[/red]\n{escape(str(e))}")
        sys.exit(1)


def _apply_filters(target, klasse: Optional[str], lehrer: Optional[str],
                   ohne_fach: tuple[str, ...]):
    from analysis.filters import filter_by_class_and_subject, filter_by_teacher_and_subject
    excluded = set(ohne_fach) or None
    if klasse:
        target = filter_by_class_and_subject(target, klasse, excluded)
    if lehrer:
        target = filter_by_teacher_and_subject(target, lehrer, excluded)
    if excluded and not klasse and not lehrer:
        target = filter_by_class_and_subject(target, None, excluded)
    return target


_filter_options = [
    click.option("--klasse", default=None, help="Nur Vertretungen dieser Klasse."),
    click.option("--lehrer", default=None, help="Nur Vertretungen dieser Lehrkraft."),
    click.option("--ohne-fach", multiple=True, help="Fach ausblenden (mehrfach möglich)."),
    click.option("--config", "config_path", default=None, help="Pfad zur YAML-Konfiguration."),
    click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Protokoll ausgeben."),
]


def _with_filter_options(f):
    for option in reversed(_filter_options):
        f = option(f)
    return f


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.argument("snapshot", type=click.Path())
@_with_filter_options
def cmd_show(snapshot: str, klasse: Optional[str], lehrer: Optional[str],
             ohne_fach: tuple[str, ...], config_path: Optional[str], verbose: bool):
    """Zeigt einen Vertretungsplan-Schnappschuss an."""
    config = _load_config_or_abort(config_path)
    _setup_logging("DEBUG" if verbose else config.log_level)
    from export.console import print_schedule

    schedule = _apply_filters(_load_schedule_or_abort(snapshot), klasse, lehrer, ohne_fach)
    print_schedule(schedule, console=console, config=config.text)


# ─── DIFF ─────────────────────────────────────────────────────────────────────

@click.command("diff")
@click.argument("old", type=click.Path())
@click.argument("new", type=click.Path())
@_with_filter_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Diff als JSON ausgeben.")
def cmd_diff(old: str, new: str, klasse: Optional[str], lehrer: Optional[str],
             ohne_fach: tuple[str, ...], config_path: Optional[str], verbose: bool,
             as_json: bool):
    """Vergleicht zwei Schnappschüsse desselben Vertretungsplans."""
    config = _load_config_or_abort(config_path)
    _setup_logging("DEBUG" if verbose else config.log_level)
    from analysis.diff import compare_schedule
    from export.console import print_schedule_diff

    old_schedule = _load_schedule_or_abort(old)
    new_schedule = _load_schedule_or_abort(new)
    diff = compare_schedule(old_schedule, new_schedule, config.diff.max_complexity)
    diff = _apply_filters(diff, klasse, lehrer, ohne_fach)

    if as_json:
        click.echo(diff.to_json())
        return
    print_schedule_diff(diff, new_schedule.type, console=console, config=config.text)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anlegen oder anzeigen."""


@cmd_config.command("init")
@click.option("--path", default=None, help="Zielpfad der YAML-Datei.")
def config_init(path: Optional[str]):
    """Legt eine Default-Konfiguration an."""
    from config.defaults import default_engine_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    target = Path(path) if path else mgr.DEFAULT_CONFIG
    if target.exists() and not click.confirm(
        f"{target} existiert bereits. Überschreiben?", default=False
    ):
        return
    mgr.save(default_engine_config(), target)


@cmd_config.command("show")
@click.option("--path", default=None, help="Pfad der YAML-Datei.")
def config_show(path: Optional[str]):
    """Zeigt die aktuelle Konfiguration an."""
    config = _load_config_or_abort(path)

    table = Table(title="Konfiguration", box=box.ROUNDED)
    table.add_column("Einstellung")
    table.add_column("Wert")
    table.add_row("diff.max_complexity", str(config.diff.max_complexity))
    table.add_row("text.insert_tag", config.text.insert_tag)
    table.add_row("text.delete_tag", config.text.delete_tag)
    table.add_row("text.instead_word", config.text.instead_word)
    table.add_row("text.room_connector", repr(config.text.room_connector))
    table.add_row("text.desc_connector", repr(config.text.desc_connector))
    table.add_row("log_level", config.log_level)
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Vertretungsplan-Diff: Schnappschüsse anzeigen und vergleichen."""


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_show)
cli.add_command(cmd_diff)
cli.add_command(cmd_config)


if __name__ == "__main__":
    main()
