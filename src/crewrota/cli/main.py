"""Typer entry point: build, validate, presets, legend."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from crewrota.cli.profiles import get_preset, list_presets
from crewrota.core.errors import CrewRotaValueError, UnknownPolicyError, UnknownSolverError
from crewrota.optimization.solvers import DEFAULT_SOLVER, available_solvers
from crewrota.planning import (
    ScheduleResult,
    build_schedule,
    coverage_dataframe,
    read_schedule_json,
    schedule_dataframe,
    write_schedule_json,
)
from crewrota.scenario import load_regime_config
from crewrota.scheduling.regime import (
    MAX_COVERAGE_DAYS,
    MAX_INDUCTION_DAYS,
    MIN_COVERAGE_DAYS,
    MIN_INDUCTION_DAYS,
    RegimeParams,
)
from crewrota.scheduling.states import legend, state_color
from crewrota.validation import first_coverage_day, validate_schedule

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Three-unit rotating rota builder.")
console = Console()

GRID_CHUNK_DAYS = 60
# Upper bound for -W and -R.
MAX_BLOCK_DAYS = 60


def _regime_overrides(
    work_days: int | None,
    rest_days: int | None,
    induction_days: int | None,
    coverage_days: int | None,
) -> dict[str, Any]:
    overrides = {
        "work_days": work_days,
        "rest_days": rest_days,
        "induction_days": induction_days,
        "coverage_days": coverage_days,
    }
    return {key: value for key, value in overrides.items() if value is not None}


def _print_diagnostics(result: ScheduleResult) -> None:
    diag = result.diagnostics
    params = result.params
    console.print(
        f"[bold]Regime[/bold] {params.short_label()} policy={result.policy.value} solver={result.solver}"
    )
    console.print(
        "offsets (standup day): "
        + ", ".join(f"{name}={start}" for name, start in zip(result.names, result.starts))
    )
    console.print(
        f"days={result.days} first_producing_day={diag.first_producing_day} "
        f"three_producing_days={diag.three_producing_days} "
        f"not_two_after_start_days={diag.not_two_after_start_days} "
        f"score={diag.score} perfect={diag.is_perfect}"
    )
    if result.timed_out:
        console.print("[yellow]Search stopped at the time limit; offsets are best found so far.[/yellow]")
    if not result.coverage_target_met:
        console.print(
            f"[yellow]Coverage target not reached: {result.two_producing_days} of "
            f"{params.coverage_days} days with two units producing.[/yellow]"
        )


def _print_grid(result: ScheduleResult, chunk: int) -> None:
    start = first_coverage_day(result.p_count)
    for lo in range(0, result.days, chunk):
        hi = min(result.days, lo + chunk)
        console.print(Text(f"days {lo}-{hi - 1}", style="dim"))
        for name, row in zip(result.names, result.states):
            line = Text(f"{name:<4}")
            for state in row[lo:hi]:
                line.append(state.value, style=f"black on {state_color(state)}")
            console.print(line)
        counts = Text("#P  ")
        for day in range(lo, hi):
            count = result.p_count[day]
            bad = count == 3 or (start != -1 and day >= start and count != 2)
            counts.append(str(count), style="bold red" if bad else "")
        console.print(counts)


def _print_alerts(alerts: list[str], max_alerts: int) -> None:
    if not alerts:
        console.print(
            "[green]No alerts: no day has 3 units producing and two units produce on every "
            "day after coverage start.[/green]"
        )
        return
    console.print(f"[bold red]{len(alerts)} alert(s)[/bold red]")
    for alert in alerts[:max_alerts]:
        console.print(f"  - {alert}")
    if len(alerts) > max_alerts:
        console.print(f"  Showing {max_alerts} of {len(alerts)} alerts.")


@app.command("build")
def build(
    work_days: Annotated[
        int | None,
        typer.Option(
            "--work-days", "-W", min=1, max=MAX_BLOCK_DAYS, help="Days in the on-duty block (W)."
        ),
    ] = None,
    rest_days: Annotated[
        int | None,
        typer.Option("--rest-days", "-R", min=1, max=MAX_BLOCK_DAYS, help="Nominal rest days (R)."),
    ] = None,
    induction_days: Annotated[
        int | None,
        typer.Option(
            "--induction-days",
            "-I",
            min=MIN_INDUCTION_DAYS,
            max=MAX_INDUCTION_DAYS,
            help="Induction days, first block only.",
        ),
    ] = None,
    coverage_days: Annotated[
        int | None,
        typer.Option(
            "--coverage-days",
            "-T",
            min=MIN_COVERAGE_DAYS,
            max=MAX_COVERAGE_DAYS,
            help="Days that must have two units producing.",
        ),
    ] = None,
    preset: Annotated[
        str | None, typer.Option("--preset", "-p", help="Named regime preset (see `presets`).")
    ] = None,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Regime YAML config file.")
    ] = None,
    policy: Annotated[
        str | None,
        typer.Option("--policy", help="Regime policy: transition-deducted/v2 (v2) or full-rest/v1 (v1)."),
    ] = None,
    solver: Annotated[
        str | None,
        typer.Option("--solver", "-s", help=f"Phase solver ({', '.join(available_solvers())})."),
    ] = None,
    time_limit: Annotated[
        float | None, typer.Option("--time-limit", min=0.0, help="Offset search budget in seconds.")
    ] = None,
    out_json: Annotated[
        Path | None, typer.Option("--out-json", help="Write the schedule as JSON.")
    ] = None,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Write the long-form grid as CSV.")
    ] = None,
    out_coverage_csv: Annotated[
        Path | None, typer.Option("--out-coverage-csv", help="Write per-day producing counts as CSV.")
    ] = None,
    telemetry_log: Annotated[
        Path | None, typer.Option("--telemetry-log", help="Append a run record to this JSONL file.")
    ] = None,
    show_grid: Annotated[bool, typer.Option("--grid/--no-grid", help="Print the state grid.")] = True,
    max_alerts: Annotated[int, typer.Option("--max-alerts", min=1, help="Alerts to print.")] = 12,
) -> None:
    """Build a three-unit rota and report its coverage alerts."""
    regime: dict[str, Any] = RegimeParams().model_dump()
    settings: dict[str, Any] = {"policy": None, "solver": DEFAULT_SOLVER, "time_limit": None}
    context: dict[str, Any] = {"command": "build"}

    if config is not None:
        try:
            cfg = load_regime_config(config)
        except (FileNotFoundError, CrewRotaValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--config") from exc
        regime = cfg.regime.model_dump()
        settings.update(policy=cfg.policy, solver=cfg.solver, time_limit=cfg.time_limit_s)
        context["config"] = str(config)
    if preset is not None:
        try:
            regime = get_preset(preset).params.model_dump()
        except KeyError as exc:
            raise typer.BadParameter(str(exc.args[0]), param_hint="--preset") from exc
        context["preset"] = preset
    regime.update(_regime_overrides(work_days, rest_days, induction_days, coverage_days))
    if policy is not None:
        settings["policy"] = policy
    if solver is not None:
        settings["solver"] = solver
    if time_limit is not None:
        settings["time_limit"] = time_limit

    try:
        result = build_schedule(
            regime,
            policy=settings["policy"],
            solver=settings["solver"],
            time_limit=settings["time_limit"],
            telemetry_log=telemetry_log,
            telemetry_context=context,
        )
    except (UnknownPolicyError, UnknownSolverError) as exc:
        raise typer.BadParameter(str(exc.args[0])) from exc

    alerts = validate_schedule(result)
    _print_diagnostics(result)
    if show_grid:
        _print_grid(result, GRID_CHUNK_DAYS)
    _print_alerts(alerts, max_alerts)

    if out_json:
        write_schedule_json(result, out_json)
        console.print(f"Schedule written to {out_json}")
    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        schedule_dataframe(result).to_csv(out_csv, index=False)
        console.print(f"Grid CSV written to {out_csv}")
    if out_coverage_csv:
        out_coverage_csv.parent.mkdir(parents=True, exist_ok=True)
        coverage_dataframe(result).to_csv(out_coverage_csv, index=False)
        console.print(f"Coverage CSV written to {out_coverage_csv}")


@app.command("validate")
def validate(
    schedule_path: Path = typer.Argument(..., help="Schedule JSON written by `build --out-json`."),
    strict: Annotated[
        bool, typer.Option("--strict", help="Exit with status 1 when any alert is raised.")
    ] = False,
    max_alerts: Annotated[int, typer.Option("--max-alerts", min=1, help="Alerts to print.")] = 12,
    as_json: Annotated[bool, typer.Option("--json", help="Print alerts as a JSON list.")] = False,
) -> None:
    """Re-run the coverage and transition checks on an exported schedule."""
    if not schedule_path.exists():
        raise typer.BadParameter(f"{schedule_path} does not exist", param_hint="SCHEDULE_PATH")
    try:
        result = read_schedule_json(schedule_path)
    except (KeyError, TypeError, ValueError) as exc:
        raise typer.BadParameter(f"{schedule_path} is not a schedule export: {exc}") from exc
    alerts = validate_schedule(result)
    if as_json:
        typer.echo(json.dumps(alerts, indent=2))
    else:
        _print_alerts(alerts, max_alerts)
    if strict and alerts:
        raise typer.Exit(1)


@app.command("presets")
def presets() -> None:
    """List named regime presets."""
    table = Table(title="Regime presets")
    table.add_column("Name")
    table.add_column("W", justify="right")
    table.add_column("R", justify="right")
    table.add_column("I", justify="right")
    table.add_column("T", justify="right")
    table.add_column("Description")
    for item in list_presets():
        p = item.params
        table.add_row(
            item.name,
            str(p.work_days),
            str(p.rest_days),
            str(p.induction_days),
            str(p.coverage_days),
            item.description,
        )
    console.print(table)


@app.command("legend")
def show_legend() -> None:
    """Print the state legend with its display colours."""
    table = Table(title="Day states")
    table.add_column("Code")
    table.add_column("State")
    table.add_column("Colour")
    for state, label, color in legend():
        table.add_row(Text(state.value, style=f"black on {color}"), label, color)
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()


__all__ = ["app", "main"]
