"""Rendering of the per-company token top-up report."""

from topup.report.writer import (
    ReportRenderError,
    display,
    new_balance,
    render_company,
    render_report,
    total_top_up,
    write_report,
)

__all__ = [
    "ReportRenderError",
    "display",
    "new_balance",
    "render_company",
    "render_report",
    "total_top_up",
    "write_report",
]
