"""
Management commands: operator task queue and report preview in the terminal.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from concrete_lab.config import APP_NAME, VERSION
from concrete_lab.core.constants import DATE_FORMAT, DISPLAY_DATE_FORMAT
from concrete_lab.core.container import ServiceContainer
from concrete_lab.core.enums import ReportVariant, UrgencyClass
from concrete_lab.core.exceptions import TestNotFound
from concrete_lab.services.data_service import DataService
from concrete_lab.utils.logger import setup_logger

app = typer.Typer(help=f"{APP_NAME} - outils de gestion")

URGENCY_LABELS = {
    UrgencyClass.OVERDUE: "EN RETARD",
    UrgencyClass.TODAY: "AUJOURD'HUI",
    UrgencyClass.UPCOMING: "DEMAIN",
}


def _container(data_file: Optional[Path]) -> ServiceContainer:
    setup_logger(console=False)
    return ServiceContainer(DataService(data_file=data_file) if data_file else None)


@app.command()
def tasks(
    today: Optional[str] = typer.Option(None, help="Reference day (YYYY-MM-DD), defaults to today"),
    data_file: Optional[Path] = typer.Option(None, help="JSON data file"),
):
    """Crushing tasks overdue, due today or due tomorrow."""
    day = None
    if today:
        try:
            day = datetime.strptime(today, DATE_FORMAT).date()
        except ValueError:
            raise typer.BadParameter(f"Invalid date: {today}", param_hint="--today")

    container = _container(data_file)
    task_list = container.notification_service.get_tasks(day)
    if not task_list:
        typer.echo("Aucune tâche en attente.")
        return

    for task in task_list:
        typer.echo(
            f"[{URGENCY_LABELS[task.urgency_class]}] {task.test_reference} - {task.project_name}: "
            f"{task.specimen_count} éprouvette(s) à {task.representative_age} j, "
            f"le {task.target_date.strftime(DISPLAY_DATE_FORMAT)}"
        )
    summary = container.notification_service.get_summary(day)
    typer.echo(f"{summary.overdue} en retard, {summary.today} aujourd'hui, {summary.upcoming} demain")


@app.command()
def report(
    test_id: int = typer.Argument(..., help="Concrete test id"),
    variant: str = typer.Option(ReportVariant.FINAL.value, help="PV (provisional) or RP (final)"),
    data_file: Optional[Path] = typer.Option(None, help="JSON data file"),
):
    """Print the specimen rows of a PV or RP report."""
    try:
        report_variant = ReportVariant(variant)
    except ValueError:
        raise typer.BadParameter(f"Unknown report variant: {variant}", param_hint="--variant")

    container = _container(data_file)
    try:
        view = container.report_service.build_report(test_id, report_variant)
    except TestNotFound as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{view.title} - {view.test_reference}")
    for row in view.rows:
        typer.echo(f"#{row.number:<3} {row.age:>3} j  {row.specimen_type.value:<12} "
                   f"{row.stress_display:>6} MPa  {row.density_display:>5} kg/m³")
    for summary in view.age_summaries:
        mean_stress = f"{summary.mean_stress:.1f}" if summary.mean_stress is not None else "-"
        typer.echo(f"Moyenne {summary.age} jours : {mean_stress} MPa ({summary.tested_count}/{summary.specimen_count})")


@app.command()
def version():
    """Show the application version."""
    typer.echo(f"{APP_NAME} {VERSION}")


if __name__ == "__main__":
    app()
