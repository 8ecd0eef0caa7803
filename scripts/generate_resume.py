#!/usr/bin/env python3
"""
Resume Generation CLI

Reconciles work history, picks the layout and renders page-budgeted resume PDFs
from an authored resume YAML.

Commands:
    timeline - Show the reconciled work timeline for an experience requirement
    strategy - Show the layout strategy for a job count
    generate - Render a resume PDF with the layout solver

Examples:\n

    generate_resume.py timeline data/jane.yaml --requirement "5+ years"

    generate_resume.py strategy 4 --certificates

    generate_resume.py generate data/jane.yaml --requirement "3-5 years" --title "Backend Engineer"

    generate_resume.py generate data/jane.yaml -o outs/results/jane.pdf --config configs/dense.yaml
"""

import os
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from quire.contexts.layout.logger import log_strategy, setup_layout_logger
from quire.contexts.layout.strategy import select_layout_strategy
from quire.contexts.rendering.backend import ReportLabBackend
from quire.contexts.rendering.content import TargetJob, YAMLContentProvider
from quire.contexts.rendering.exceptions import RenderBackendError
from quire.contexts.rendering.logger import setup_rendering_logger
from quire.contexts.timeline.logger import setup_timeline_logger
from quire.contexts.timeline.reconciler import reconcile_timeline
from quire.pipeline import generate_resume
from quire.utils.config import load_settings
from quire.utils.timestamp import now, today

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH") or "outs/logs")
RESULTS_PATH = Path(os.getenv("RESULTS_PATH") or "outs/results")


app = typer.Typer(
    help="Reconcile work history and render page-budgeted resume PDFs",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _parse_reference_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.secho(f"Error: --today must be YYYY-MM-DD, got '{value}'\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _load_provider(resume_yaml: Path) -> YAMLContentProvider:
    try:
        return YAMLContentProvider(resume_yaml)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("timeline")
def timeline_command(
    resume_yaml: Annotated[
        Path,
        typer.Argument(help="Authored resume YAML (work, education, birthday)"),
    ],
    requirement: Annotated[
        str,
        typer.Option("--requirement", "-r", help='Experience requirement, e.g. "3-5 years", "5+ years"'),
    ] = "",
    reference_date: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date YYYY-MM-DD (default: today)"),
    ] = None,
):
    """
    Show the reconciled work timeline.

    Examples:\n

        $ generate_resume.py timeline data/jane.yaml -r "5+ years"

        $ generate_resume.py timeline data/jane.yaml -r "3年以上" --today 2025-06-01
    """
    provider = _load_provider(resume_yaml)
    settings = load_settings()
    setup_timeline_logger(LOGS_PATH / f"timeline_{now()}")

    result = reconcile_timeline(
        provider.work_entries(),
        provider.education_entries(),
        requirement=requirement,
        birthday=provider.birthday,
        today=_parse_reference_date(reference_date),
        gap_threshold_months=settings.gap_threshold_months,
        fallback_floor_date=settings.fallback_floor_date,
    )

    typer.secho(f"\nTimeline ({result.requirement})", fg=typer.colors.BLUE, bold=True)
    for segment in result.segments:
        color = typer.colors.YELLOW if segment.is_synthesized else None
        typer.secho(f"  {segment}", fg=color)

    typer.echo("")
    typer.echo(f"  Actual experience:  {result.actual_experience_text}")
    typer.echo(f"  Supplemented:       {result.supplement_years}y")
    typer.echo(f"  Total:              {result.final_total_years}y")
    typer.echo(f"  Floor date:         {result.floor_date}")
    if result.seniority_threshold_date:
        typer.echo(f"  Seniority from:     {result.seniority_threshold_date}")


@app.command("strategy")
def strategy_command(
    job_count: Annotated[int, typer.Argument(help="Number of jobs on the resume")],
    certificates: Annotated[
        bool,
        typer.Option("--certificates", "-c", help="Resume has a certificates section"),
    ] = False,
):
    """
    Show the layout strategy for a job count.

    Examples:\n

        $ generate_resume.py strategy 4

        $ generate_resume.py strategy 3 --certificates
    """
    setup_layout_logger(LOGS_PATH / f"strategy_{now()}")
    strategy = select_layout_strategy(job_count, certificates)
    log_strategy(job_count, certificates, strategy)
    typer.echo(f"Target pages:   {strategy.target_pages}")
    typer.echo(f"Skill columns:  {strategy.skill_columns}")
    typer.echo(f"Skills:         {strategy.skill_categories} categories x {strategy.skill_items_per_cat} items")


@app.command("generate")
def generate_command(
    resume_yaml: Annotated[
        Path,
        typer.Argument(help="Authored resume YAML"),
    ],
    requirement: Annotated[
        str,
        typer.Option("--requirement", "-r", help="Experience requirement of the target job"),
    ] = "",
    title: Annotated[
        str,
        typer.Option("--title", "-t", help="Target job title"),
    ] = "",
    company: Annotated[
        str,
        typer.Option("--company", help="Target company"),
    ] = "",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="PDF path (default: RESULTS_PATH/<date>/<yaml stem>.pdf)"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Layout config YAML (default: QUIRE_LAYOUT_CONFIG or packaged)"),
    ] = None,
    reference_date: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date YYYY-MM-DD (default: today)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="List every validation issue"),
    ] = False,
):
    """
    Render a resume PDF with the layout solver.

    Examples:\n

        $ generate_resume.py generate data/jane.yaml -r "5+ years" -t "Staff Engineer"

        $ generate_resume.py generate data/jane.yaml -o jane.pdf --config configs/dense.yaml
    """
    provider = _load_provider(resume_yaml)
    try:
        settings = load_settings(config)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output_path = output or RESULTS_PATH / today() / f"{resume_yaml.stem}.pdf"
    log_dir = LOGS_PATH / f"generate_{now()}"
    log_file = setup_rendering_logger(log_dir)

    typer.secho(f"\nGenerating: {resume_yaml.stem}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Log: {log_file}")
    typer.echo("")

    try:
        with ReportLabBackend(settings) as backend:
            result = generate_resume(
                provider.work_entries(),
                provider.education_entries(),
                TargetJob(title=title, company=company, experience_requirement=requirement),
                provider,
                backend,
                settings=settings,
                birthday=provider.birthday,
                today=_parse_reference_date(reference_date),
                output_path=output_path,
                resume_name=resume_yaml.stem,
            )
    except RenderBackendError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    typer.secho(f"✓ PDF written: {result.pdf_path}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}/{result.strategy.target_pages}")
    typer.echo(f"  Bullets per job: {list(result.allocation.config)}")
    typer.echo(f"  Danger zone: {result.allocation.danger_zone_height:g}px")

    if not result.validation.is_valid:
        typer.secho(f"\n⚠ {len(result.validation.issues)} layout issue(s):", fg=typer.colors.YELLOW)
        issues = result.validation.issues if verbose else result.validation.issues[:5]
        for issue in issues:
            typer.echo(f"  - {issue}")


if __name__ == "__main__":
    app()
