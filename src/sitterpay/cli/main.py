from __future__ import annotations

import json
from contextlib import nullcontext
from pathlib import Path

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from sitterpay.cli._utils import build_rate_config, parse_hour_argument, rate_setting_help
from sitterpay.core.errors import SitterPayValueError
from sitterpay.costing import HourBreakdown, PayCalculator, PayResult, RateConfig
from sitterpay.costing.batch import price_shifts, read_shifts_csv, summarize_batch
from sitterpay.costing.calculator import format_amount
from sitterpay.scheduling.hours import NONE_SPECIFIED_LABEL, hour_options
from sitterpay.telemetry import RunTelemetryLogger
from sitterpay.validation import validate_shift_window

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Babysitting pay calculator (start-to-bedtime, bedtime-to-midnight, midnight-to-end).",
)
console = Console()

CONFIG_OPTION_HELP = "Rate configuration YAML (rules / pay_rate sections)."
RATE_OPTION_HELP = "Repeatable name=value override, e.g. --rate midnight_to_end=20. " + rate_setting_help()
TELEMETRY_OPTION_HELP = "Append a JSONL run record to this file."


def _cell(value: object) -> str:
    if value is None or pd.isna(value):
        return "—"
    try:
        return format_amount(float(value))
    except (TypeError, ValueError):
        return str(value)


def _render_breakdown(result: PayResult, hours: HourBreakdown, config: RateConfig) -> None:
    rates = config.pay_rate
    table = Table(title="Shift Pay Breakdown")
    table.add_column("Bucket", style="cyan", no_wrap=True)
    table.add_column("Hours", justify="right")
    table.add_column("Rate ($/h)", justify="right")
    table.add_column("Subtotal ($)", justify="right")
    rows = [
        ("Start → bedtime", hours.pre_bedtime, rates.start_to_bedtime),
        ("Bedtime → midnight", hours.bedtime_to_midnight, rates.bedtime_to_midnight),
        ("Midnight → end", hours.midnight_to_end, rates.midnight_to_end),
    ]
    for label, bucket_hours, rate in rows:
        table.add_row(
            label, str(bucket_hours), format_amount(rate), format_amount(bucket_hours * rate)
        )
    console.print(table)
    console.print(f"[bold]Total:[/bold] ${format_amount(result.pay)}")
    console.print(f"[dim]{result.message}[/dim]")


@app.command("calc")
def calc_cmd(
    start: str = typer.Argument(..., help="Start hour (0-23, or e.g. 6pm)."),
    end: str = typer.Argument(..., help="End hour (0-23, or e.g. 3am)."),
    bed: str | None = typer.Option(None, "--bed", "-b", help="Bedtime hour (optional)."),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        envvar="SITTERPAY_CONFIG",
        exists=True,
        dir_okay=False,
        help=CONFIG_OPTION_HELP,
    ),
    rate: list[str] | None = typer.Option(None, "--rate", "-r", help=RATE_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
    telemetry_log: Path | None = typer.Option(
        None, "--telemetry-log", dir_okay=False, help=TELEMETRY_OPTION_HELP
    ),
) -> None:
    """Calculate the pay for a single shift."""

    start_hour = parse_hour_argument(start, "START")
    end_hour = parse_hour_argument(end, "END")
    bed_hour = parse_hour_argument(bed, "--bed")
    config = build_rate_config(config_path, rate)
    calculator = PayCalculator(config)

    telemetry_logger: RunTelemetryLogger | None = None
    if telemetry_log:
        telemetry_logger = RunTelemetryLogger(
            log_path=telemetry_log,
            command="calc",
            config=config.model_dump(),
            context={
                "start": start_hour,
                "end": end_hour,
                "bed": bed_hour,
                "config_path": str(config_path) if config_path else None,
                "rate_overrides": list(rate or []),
            },
        )

    with (telemetry_logger if telemetry_logger else nullcontext()) as run_logger:
        warnings = validate_shift_window(
            start=start_hour, end=end_hour, bed=bed_hour, rules=config.rules
        )
        result = calculator.calc(start_hour, end_hour, bed_hour)
        if run_logger is not None:
            run_logger.finalize(
                status="ok" if result.success else "invalid",
                metrics={**result.to_dict(), "warnings": warnings},
            )

    if as_json:
        typer.echo(json.dumps({**result.to_dict(), "warnings": warnings}, indent=2))
    else:
        for warning in warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        if result.success and result.hours is not None:
            _render_breakdown(result, result.hours, config)
        else:
            console.print(f"[red]{result.message}[/red]")
    if not result.success:
        raise typer.Exit(1)


@app.command("batch")
def batch_cmd(
    shifts_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="CSV with start_hour, end_hour[, bed_hour]."
    ),
    out: Path | None = typer.Option(None, "--out", "-o", help="Write priced shifts to this CSV."),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        envvar="SITTERPAY_CONFIG",
        exists=True,
        dir_okay=False,
        help=CONFIG_OPTION_HELP,
    ),
    rate: list[str] | None = typer.Option(None, "--rate", "-r", help=RATE_OPTION_HELP),
    telemetry_log: Path | None = typer.Option(
        None, "--telemetry-log", dir_okay=False, help=TELEMETRY_OPTION_HELP
    ),
) -> None:
    """Price every shift listed in a CSV file."""

    config = build_rate_config(config_path, rate)
    try:
        frame = read_shifts_csv(shifts_path)
    except SitterPayValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    telemetry_logger: RunTelemetryLogger | None = None
    if telemetry_log:
        telemetry_logger = RunTelemetryLogger(
            log_path=telemetry_log,
            command="batch",
            config=config.model_dump(),
            context={"shifts_path": str(shifts_path), "out": str(out) if out else None},
        )

    with (telemetry_logger if telemetry_logger else nullcontext()) as run_logger:
        priced = price_shifts(PayCalculator(config), frame)
        summary = summarize_batch(priced)
        if out is not None:
            out.parent.mkdir(parents=True, exist_ok=True)
            priced.to_csv(out, index=False)
        if run_logger is not None:
            run_logger.finalize(metrics=summary)

    table = Table(title=f"Priced Shifts: {shifts_path.name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Bed", justify="right")
    table.add_column("Pay ($)", justify="right")
    table.add_column("Breakdown / Error", overflow="fold")
    for idx, row in enumerate(priced.itertuples(index=False), start=1):
        detail = row.message if row.success else f"[red]{row.message}[/red]"
        table.add_row(
            str(idx),
            _cell(row.start_hour),
            _cell(row.end_hour),
            _cell(row.bed_hour),
            format_amount(row.pay),
            detail,
        )
    console.print(table)
    console.print(
        f"[bold]{summary['priced']}[/bold] of {summary['shifts']} shift(s) priced, "
        f"{summary['total_hours']} h, total ${format_amount(summary['total_pay'])}"
    )
    if summary["failed"]:
        console.print(f"[yellow]{summary['failed']} shift(s) rejected.[/yellow]")
    if out is not None:
        console.print(f"[dim]Priced shifts written to {out}.[/dim]")


@app.command("hours")
def hours_cmd(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        envvar="SITTERPAY_CONFIG",
        exists=True,
        dir_okay=False,
        help=CONFIG_OPTION_HELP,
    ),
) -> None:
    """List the hours offered for start, bedtime, and end selection."""

    config = build_rate_config(config_path, None)
    table = Table(title="Allowed Hours")
    table.add_column("Label", style="cyan")
    table.add_column("Value", justify="right")
    for option in hour_options(config.rules, include_none=True):
        table.add_row(option.label, "—" if option.value is None else str(option.value))
    console.print(table)
    console.print(f"[dim]'{NONE_SPECIFIED_LABEL}' applies to bedtime only.[/dim]")


@app.command("rates")
def rates_cmd(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        envvar="SITTERPAY_CONFIG",
        exists=True,
        dir_okay=False,
        help=CONFIG_OPTION_HELP,
    ),
    rate: list[str] | None = typer.Option(None, "--rate", "-r", help=RATE_OPTION_HELP),
) -> None:
    """Show the effective shift rules and pay rates."""

    config = build_rate_config(config_path, rate)
    table = Table(title="Rate Configuration")
    table.add_column("Section", style="bold")
    table.add_column("Setting")
    table.add_column("Value", justify="right")
    for section, values in config.model_dump().items():
        for name, value in values.items():
            table.add_row(section, name, format_amount(value))
    console.print(table)


if __name__ == "__main__":
    app()
