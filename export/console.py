"""Terminal-Ausgabe von Vertretungsplänen und Plan-Diffs (Rich).

Wird von ``main.py show`` und ``main.py diff`` verwendet.
"""

import html
import re
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from analysis.diff import DayDiff, ScheduleDiff
from config.schema import TextConfig
from export.text import describe, describe_diff, describe_for_teacher_view, join_classes, join_teachers
from models.natural_order import natural_key
from models.schedule import Schedule, ScheduleType
from models.schedule_day import ScheduleDay
from models.substitution import Substitution

_INSERT_STYLE = "bold green"
_DELETE_STYLE = "red strike"


def diff_markup(text: str, config: Optional[TextConfig] = None) -> str:
    """Wandelt <ins>/<del>-Markierungen in Rich-Markup um.

    Der übrige Text wird entschlüsselt (HTML-Entities) und für Rich escaped.
    """
    cfg = config or TextConfig()
    styles = {
        f"<{cfg.insert_tag}>": f"[{_INSERT_STYLE}]",
        f"</{cfg.insert_tag}>": f"[/{_INSERT_STYLE}]",
        f"<{cfg.delete_tag}>": f"[{_DELETE_STYLE}]",
        f"</{cfg.delete_tag}>": f"[/{_DELETE_STYLE}]",
    }
    pattern = "(" + "|".join(re.escape(tag) for tag in styles) + ")"
    parts = []
    for chunk in re.split(pattern, text):
        if chunk in styles:
            parts.append(styles[chunk])
        elif chunk:
            parts.append(escape(html.unescape(chunk)))
    return "".join(parts)


def _sorted(substitutions):
    return sorted(substitutions, key=lambda s: natural_key(s.lesson or ""))


def _who(s: Substitution, schedule_type: ScheduleType) -> str:
    if schedule_type == ScheduleType.TEACHER:
        return join_teachers(s.teachers | s.previous_teachers)
    return join_classes(s.classes)


def _text(s: Substitution, schedule_type: ScheduleType, cfg: TextConfig) -> str:
    if schedule_type == ScheduleType.TEACHER:
        return describe_for_teacher_view(s, cfg)
    return describe(s, cfg)


def _new_table(title: str, schedule_type: ScheduleType, with_status: bool = False) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    if with_status:
        table.add_column("Status")
    table.add_column("Std.")
    table.add_column("Lehrkraft" if schedule_type == ScheduleType.TEACHER else "Klasse(n)")
    table.add_column("Art")
    table.add_column("Vertretung")
    return table


# ─── Plan ─────────────────────────────────────────────────────────────────────

def day_table(day: ScheduleDay, schedule_type: ScheduleType = ScheduleType.STUDENT,
              config: Optional[TextConfig] = None) -> Table:
    """Tabelle aller Vertretungen eines Tages, nach Stunde sortiert."""
    cfg = config or TextConfig()
    table = _new_table(escape(str(day.display_date())), schedule_type)
    for s in _sorted(day.substitutions):
        table.add_row(
            escape(s.lesson or ""),
            escape(_who(s, schedule_type)),
            escape(s.type or ""),
            escape(_text(s, schedule_type, cfg)),
        )
    return table


def print_schedule(schedule: Schedule, console: Optional[Console] = None,
                   config: Optional[TextConfig] = None) -> None:
    """Gibt einen ganzen Vertretungsplan formatiert über Rich aus."""
    console = console or Console()
    console.print(Panel(
        f"[bold]Vertretungsplan[/bold]  |  Stand: {escape(schedule.display_last_change() or 'unbekannt')}",
        border_style="cyan",
    ))
    if not schedule.days:
        console.print("[dim]Keine Tage vorhanden.[/dim]")
    for day in schedule.days:
        console.print(day_table(day, schedule.type, config))
        for message in day.messages:
            console.print(f"  [cyan]•[/cyan] {escape(message)}")
    for info in schedule.additional_infos:
        console.print(Panel(escape(info.text), title=escape(info.title), border_style="yellow"))


# ─── Diff ─────────────────────────────────────────────────────────────────────

def day_diff_table(day_diff: DayDiff, schedule_type: ScheduleType = ScheduleType.STUDENT,
                   config: Optional[TextConfig] = None) -> Table:
    """Tabelle der Änderungen eines Tages: neu / geändert / entfällt."""
    cfg = config or TextConfig()
    table = _new_table(escape(str(day_diff.display_date())), schedule_type, with_status=True)
    for s in _sorted(day_diff.new_substitutions):
        table.add_row("[green]neu[/green]", escape(s.lesson or ""), escape(_who(s, schedule_type)),
                      escape(s.type or ""), escape(_text(s, schedule_type, cfg)))
    for d in sorted(day_diff.edited_substitutions, key=lambda d: natural_key(d.new.lesson or "")):
        lesson = d.new.lesson or ""
        if d.old.lesson != d.new.lesson:
            lesson = f"{d.old.lesson or ''} → {lesson}"
        table.add_row("[yellow]geändert[/yellow]", escape(lesson), escape(_who(d.new, schedule_type)),
                      escape(d.new.type or ""), diff_markup(describe_diff(d, cfg), cfg))
    for s in _sorted(day_diff.removed_substitutions):
        table.add_row("[red]entfällt[/red]", escape(s.lesson or ""), escape(_who(s, schedule_type)),
                      escape(s.type or ""), escape(_text(s, schedule_type, cfg)))
    return table


def print_schedule_diff(diff: ScheduleDiff, schedule_type: ScheduleType = ScheduleType.STUDENT,
                        console: Optional[Console] = None,
                        config: Optional[TextConfig] = None) -> None:
    """Gibt einen Plan-Diff formatiert über Rich aus."""
    console = console or Console()
    if diff.is_empty():
        console.print("[dim]Keine Änderungen.[/dim]")
        return

    for day in diff.new_days:
        console.print(f"[bold green]+ Neuer Tag:[/bold green] {escape(str(day.display_date()))}")
        console.print(day_table(day, schedule_type, config))

    for day_diff in diff.edited_days:
        if day_diff.is_empty():
            continue
        if day_diff.new_substitutions or day_diff.edited_substitutions or day_diff.removed_substitutions:
            console.print(day_diff_table(day_diff, schedule_type, config))
        else:
            console.print(f"[bold]{escape(str(day_diff.display_date()))}[/bold]")
        for message in day_diff.new_messages:
            console.print(f"  [green]+[/green] {escape(message)}")
        for message in day_diff.removed_messages:
            console.print(f"  [red]-[/red] {escape(message)}")

    for day in diff.removed_days:
        console.print(f"[bold red]- Tag entfernt:[/bold red] {escape(str(day.display_date()))}")

    for info in diff.new_additional_infos:
        console.print(Panel(escape(info.text), title=f"[green]+[/green] {escape(info.title)}",
                            border_style="green"))
    for info in diff.removed_additional_infos:
        console.print(Panel(escape(info.text), title=f"[red]-[/red] {escape(info.title)}",
                            border_style="red"))
