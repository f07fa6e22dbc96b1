"""
Console reporter for validation results.

Formats validation results using Rich for clear, colored output.
"""

from rich.console import Console
from rich.table import Table

from topup.validation.core import ValidationResult


class ConsoleReporter:
    """Formats and displays validation results to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_results(self, results: list[ValidationResult]) -> None:
        """
        Print validation results as a formatted table.

        Args:
            results: List of validation results to display.
        """
        table = Table(title="Input Validation Results", show_header=True)
        table.add_column("Dataset", style="cyan", no_wrap=True)
        table.add_column("Kind", style="blue")
        table.add_column("Status", justify="center")
        table.add_column("Records", justify="right")
        table.add_column("Valid", justify="right")
        table.add_column("Invalid", justify="right")
        table.add_column("Details", style="dim")

        for result in results:
            table.add_row(
                result.dataset_name,
                result.kind,
                self._format_status(result),
                self._format_count(result.total_records),
                self._format_count(result.valid_records),
                self._format_count(result.invalid_records),
                self._format_details(result),
            )

        self.console.print(table)

        self._print_summary(results)
        self._print_missing_keys(results)

    @staticmethod
    def _format_count(value: int | None) -> str:
        return str(value) if value is not None else "-"

    def _format_status(self, result: ValidationResult) -> str:
        """
        Format validation status with color.

        Args:
            result: Validation result.

        Returns:
            Formatted status string with color markup.
        """
        if not result.exists:
            return "[yellow]Missing[/yellow]"
        if not result.parsed:
            return "[red]Malformed[/red]"
        if not result.valid_records:
            return "[yellow]Empty[/yellow]"
        return "[green]Pass[/green]"

    def _format_details(self, result: ValidationResult) -> str:
        if result.error_message:
            return result.error_message
        if result.invalid_records:
            return "See missing keys below"
        return "OK"

    def _print_summary(self, results: list[ValidationResult]) -> None:
        """
        Print summary statistics.

        Args:
            results: List of validation results.
        """
        usable = sum(1 for r in results if r.usable)

        self.console.print()
        self.console.print("[bold]Summary:[/bold]")
        self.console.print(f"  Total datasets: {len(results)}")
        self.console.print(f"  [green]Usable: {usable}[/green]")
        self.console.print(f"  [red]Unusable: {len(results) - usable}[/red]")
        if usable < len(results):
            self.console.print(
                "  [yellow]The report is only written when every dataset "
                "has at least one valid record.[/yellow]"
            )

    def _print_missing_keys(self, results: list[ValidationResult]) -> None:
        """
        Print per-key counts of records that lack a required key.

        Args:
            results: List of validation results.
        """
        with_gaps = [r for r in results if r.missing_keys]
        if not with_gaps:
            return

        self.console.print()
        self.console.print("[bold yellow]Missing Required Keys:[/bold yellow]")

        for result in with_gaps:
            self.console.print()
            self.console.print(f"[bold]{result.dataset_name}[/bold] ({result.kind}):")
            self.console.print(f"  File: {result.file_path}")
            for key, count in sorted(result.missing_keys.items()):
                self.console.print(f"  {key}: {count}")
