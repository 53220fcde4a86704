"""ITC-2019-Bewertung — Haupt-CLI.

Verwendung:
  python main.py evaluate <problem.xml> <loesung.xml>          Lösung bewerten
  python main.py evaluate <problem.xml> <loesung.xml> --json   Bericht als JSON
  python main.py evaluate ... --workers 4                      parallele Auswertung
  python main.py info <problem.xml>                            Instanz-Übersicht
  python main.py config show                                   Konfiguration anzeigen
  python main.py config init                                   Standard-Konfiguration anlegen

Exit-Code von evaluate: 0 = gültig, 1 = ungültig oder Fehler.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

_config_option = click.option(
    "--config", "config_path", type=click.Path(path_type=Path), default=None,
    help="Pfad zur YAML-Konfiguration (Standard: config/engine.yaml).",
)


def _load_config(config_path: Optional[Path]):
    """Lädt die Konfiguration; ohne Datei gelten die Standardwerte."""
    from config.manager import ConfigManager
    mgr = ConfigManager(config_path)
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red bold]Konfiguration ungültig:[/red bold]\n{e}")
        sys.exit(1)


def _setup_logging(config) -> None:
    """Root-Logger einmalig über Rich konfigurieren (stderr, damit --json sauber bleibt)."""
    from rich.logging import RichHandler
    logging.basicConfig(
        level=config.logging.level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=config.logging.rich_tracebacks,
        )],
    )


# ─── EVALUATE ─────────────────────────────────────────────────────────────────

@click.command("evaluate")
@click.argument("problem", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("solution", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--workers", "-w", type=click.IntRange(0, 64), default=None,
              help="Worker-Threads (überschreibt die Konfiguration).")
@click.option("--quick", is_flag=True, default=False,
              help="Nur Machbarkeit prüfen, bei erster harter Verletzung abbrechen.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Bericht als JSON auf stdout ausgeben.")
@_config_option
def cmd_evaluate(problem: Path, solution: Path, workers: Optional[int], quick: bool,
                 as_json: bool, config_path: Optional[Path]):
    """Bewertet eine Lösung gegen eine Probleminstanz."""
    from analysis.evaluator import TimetableEvaluator
    from data.itc_import import load_problem
    from data.solution_import import load_solution
    from models.errors import TimetablingError

    _, config = _load_config(config_path)
    _setup_logging(config)
    evaluation = config.evaluation
    if workers is not None:
        evaluation = evaluation.model_copy(update={"num_workers": workers})

    try:
        instance = load_problem(problem)
        timetable = load_solution(solution, instance)
        evaluator = TimetableEvaluator(instance, evaluation)
        if quick or evaluation.stop_at_first_hard_violation:
            feasible = evaluator.is_feasible(timetable)
            if as_json:
                click.echo(json.dumps({"instance_name": instance.name, "is_valid": feasible}))
            elif feasible:
                console.print("[bold green]✓ ZULÄSSIG[/bold green]")
            else:
                console.print("[bold red]✗ UNZULÄSSIG[/bold red]")
            sys.exit(0 if feasible else 1)
        report = evaluator.evaluate(timetable)
    except (TimetablingError, ValueError) as e:
        console.print(f"[red bold]Bewertung fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)

    if as_json:
        click.echo(report.model_dump_json(indent=2))
    else:
        report.print_rich(
            max_rows=config.report.max_rows,
            show_satisfied=config.report.show_satisfied,
        )
    sys.exit(0 if report.is_valid else 1)


# ─── INFO ─────────────────────────────────────────────────────────────────────

@click.command("info")
@click.argument("problem", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_config_option
def cmd_info(problem: Path, config_path: Optional[Path]):
    """Zeigt eine Übersicht über eine Probleminstanz."""
    from data.itc_import import ItcProblemImporter
    from models.errors import TimetablingError

    _, config = _load_config(config_path)
    _setup_logging(config)
    importer = ItcProblemImporter(problem)
    try:
        instance = importer.load()
    except (TimetablingError, ValueError) as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)

    importer.report.print_rich()
    console.print(f"\n{instance.summary()}")

    kinds: dict[str, list[int]] = {}
    for hard in instance.hard_constraints:
        kinds.setdefault(hard.constraint.kind.value, [0, 0])[0] += 1
    for soft in instance.soft_constraints:
        kinds.setdefault(soft.constraint.kind.value, [0, 0])[1] += 1
    if kinds:
        table = Table(title="Verteilungs-Constraints", box=box.ROUNDED)
        table.add_column("Art")
        table.add_column("Hart", justify="right")
        table.add_column("Weich", justify="right")
        for name, (n_hard, n_soft) in sorted(kinds.items()):
            table.add_row(name, str(n_hard), str(n_soft))
        console.print(table)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@_config_option
def config_show(config_path: Optional[Path]):
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config(config_path)

    source = str(mgr.path) if mgr.exists() else "Standardwerte (keine Datei)"
    console.print(Panel(f"[bold]Quelle:[/bold] {source}",
                        title="Engine-Konfiguration", border_style="cyan"))

    table = Table(box=box.ROUNDED)
    table.add_column("Bereich")
    table.add_column("Einstellung")
    table.add_column("Wert")
    for section_name, section in (
        ("evaluation", config.evaluation),
        ("logging", config.logging),
        ("report", config.report),
    ):
        for key, value in section.model_dump().items():
            table.add_row(section_name, key, str(value))
    console.print(table)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Datei überschreiben.")
@_config_option
def config_init(force: bool, config_path: Optional[Path]):
    """Legt eine kommentierte Standard-Konfiguration an."""
    from config.defaults import default_engine_config
    from config.manager import ConfigManager

    mgr = ConfigManager(config_path)
    if mgr.exists() and not force:
        console.print(
            f"[yellow]{mgr.path} existiert bereits.[/yellow] "
            "Mit [bold]--force[/bold] überschreiben."
        )
        sys.exit(1)
    path = mgr.save(default_engine_config())
    console.print(f"[green]✓[/green] Konfiguration gespeichert: {path}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Bewertung von Hochschul-Stundenplänen nach ITC 2019.

    Beispiel: python main.py evaluate problem.xml loesung.xml
    """


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_evaluate)
cli.add_command(cmd_info)
cli.add_command(cmd_config)


if __name__ == "__main__":
    main()
