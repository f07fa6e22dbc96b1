"""Command-line interface for the token top-up report."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
import yaml
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from topup.config.settings import PipelineConfig

app = typer.Typer(
    name="topup",
    help="Company token top-up report generator.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file. Defaults apply when omitted.",
        exists=True,
        dir_okay=False,
    ),
]
DataRootOption = Annotated[
    Path | None,
    typer.Option("--data-root", "-d", help="Directory the file paths are relative to."),
]
CompaniesOption = Annotated[
    Path | None,
    typer.Option("--companies", help="Companies JSON file (default: companies.json)."),
]
UsersOption = Annotated[
    Path | None,
    typer.Option("--users", help="Users JSON file (default: users.json)."),
]


def _build_config(
    config: Path | None,
    *,
    data_root: Path | None = None,
    companies: Path | None = None,
    users: Path | None = None,
    output: Path | None = None,
    strict_ids: bool = False,
    log_level: str | None = None,
    json_logs: bool = False,
) -> "PipelineConfig":
    """Load config and apply command-line overrides."""
    from topup.config.loader import load_config
    from topup.config.settings import IdPolicy, LoggingConfig

    pipeline_config = load_config(config)

    overrides = {
        name: value
        for name, value in {
            "data_root": data_root,
            "companies": companies,
            "users": users,
            "output": output,
        }.items()
        if value is not None
    }
    update: dict[str, object] = {}
    if overrides:
        update["paths"] = pipeline_config.paths.model_copy(update=overrides)
    if strict_ids:
        update["id_policy"] = IdPolicy.STRICT
    if log_level is not None or json_logs:
        update["logging"] = LoggingConfig(
            level=log_level or pipeline_config.logging.level,
            json_output=json_logs or pipeline_config.logging.json_output,
        )
    return pipeline_config.model_copy(update=update) if update else pipeline_config


@app.command()
def run(
    config: ConfigOption = None,
    data_root: DataRootOption = None,
    companies: CompaniesOption = None,
    users: UsersOption = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Report file (default: output.txt)."),
    ] = None,
    strict_ids: Annotated[
        bool,
        typer.Option(
            "--strict-ids",
            help="Reject companies whose id is not an integer instead of coercing it.",
        ),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", "-l", help="Log level (DEBUG, INFO, ...)."),
    ] = None,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines."),
    ] = False,
) -> None:
    """Generate the token top-up report."""
    from topup.pipeline import TopUpPipeline
    from topup.utils.logging import configure_logging_from

    try:
        pipeline_config = _build_config(
            config,
            data_root=data_root,
            companies=companies,
            users=users,
            output=output,
            strict_ids=strict_ids,
            log_level=log_level,
            json_logs=json_logs,
        )
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    configure_logging_from(pipeline_config.logging)

    console.print(f"[blue]Companies: {pipeline_config.companies_path}[/blue]")
    console.print(f"[blue]Users: {pipeline_config.users_path}[/blue]")
    console.print(f"[dim]Id policy: {pipeline_config.id_policy.value}[/dim]")

    result = TopUpPipeline(pipeline_config).run()

    console.print()
    table = Table(title="Top-Up Report Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Valid companies", str(result.n_companies))
    table.add_row("Valid users", str(result.n_users))
    table.add_row("Companies reported", str(len(result.companies)))
    table.add_row("Users reported", str(result.n_reported_users))
    console.print(table)

    if result.skipped:
        console.print("\n[yellow]Nothing to report: no valid records to join.[/yellow]")
        return

    if not result.written:
        console.print(
            f"[red]Report was not written: {pipeline_config.output_path}[/red]"
        )
        raise typer.Exit(code=1)

    console.print(f"\n[green]Saved to: {result.output_path}[/green]")


@app.command()
def validate(
    config: ConfigOption = None,
    data_root: DataRootOption = None,
    companies: CompaniesOption = None,
    users: UsersOption = None,
) -> None:
    """Check the input files against their record contracts."""
    from topup.validation import ConsoleReporter, ValidationRunner

    console.print("[blue]Running input validation...[/blue]")

    try:
        pipeline_config = _build_config(
            config, data_root=data_root, companies=companies, users=users
        )
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    runner = ValidationRunner(pipeline_config)
    results = runner.run()

    reporter = ConsoleReporter(console)
    reporter.print_results(results)

    if any(not r.parsed for r in results):
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version information."""
    from topup import __version__

    console.print(f"topup version {__version__}")


if __name__ == "__main__":
    app()
