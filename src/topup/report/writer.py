"""
Text report rendering.

One block per company, in the order given:

    Company Id: <id>
    Company Name: <name>
    Users Emailed:
        <last_name>, <first_name>, <email>
          Previous Token Balance: <tokens>
          New Token Balance: <new balance>
    Users Not Emailed:
        ...
        Total Top Ups for <name>: <total>

Blocks are separated by a single blank line.
"""

from collections.abc import Iterable, Sequence
from numbers import Number
from pathlib import Path
from typing import Any

from topup.aggregation.core import EnrichedCompany, is_set
from topup.schemas.records import Record
from topup.utils.logging import get_logger

log = get_logger(__name__)

COMPANY_INDENT = " " * 4
USER_INDENT = " " * 8
BALANCE_INDENT = " " * 10


class ReportRenderError(Exception):
    """A company block could not be rendered from its record values."""

    def __init__(self, company_id: Any, detail: str) -> None:
        self.company_id = company_id
        self.detail = detail
        super().__init__(f"Cannot render company {company_id!r}: {detail}")


def display(value: Any) -> str:
    """Format a JSON value for the report: null is empty, booleans lowercase."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _add(balance: Any, amount: Any) -> Any:
    if isinstance(balance, bool) or not isinstance(balance, Number):
        msg = f"token balance is not a number: {balance!r}"
        raise TypeError(msg)
    if isinstance(amount, bool) or not isinstance(amount, Number):
        msg = f"top up is not a number: {amount!r}"
        raise TypeError(msg)
    return balance + amount


def new_balance(user: Record, top_up: Any) -> Any:
    """Token balance after the top-up; inactive users keep their balance."""
    if is_set(user["active_status"]):
        return _add(user["tokens"], top_up)
    return user["tokens"]


def total_top_up(company: EnrichedCompany) -> Any:
    """Sum of top-ups granted to the active users who were not emailed."""
    total: Any = 0
    for user in company.not_emailed_users:
        if is_set(user["active_status"]):
            total = _add(total, company.top_up)
    return total


def render_users(users: Iterable[Record], top_up: Any, heading: str) -> list[str]:
    """Render a bucket heading followed by three lines per user."""
    lines = [f"{COMPANY_INDENT}{heading}"]
    for user in users:
        lines.append(
            f"{USER_INDENT}{display(user['last_name'])}, "
            f"{display(user['first_name'])}, {display(user['email'])}"
        )
        lines.append(
            f"{BALANCE_INDENT}Previous Token Balance: {display(user['tokens'])}"
        )
        lines.append(
            f"{BALANCE_INDENT}New Token Balance: {display(new_balance(user, top_up))}"
        )
    return lines


def render_company(company: EnrichedCompany) -> list[str]:
    """
    Render the report block for one company.

    Emailed users are shown with a top-up of 0; the company's top-up
    only applies to the not emailed bucket and to the total line.

    Raises:
        ReportRenderError: If a balance or top-up needed for arithmetic
            is not a number.
    """
    try:
        return [
            f"{COMPANY_INDENT}Company Id: {display(company.id)}",
            f"{COMPANY_INDENT}Company Name: {display(company.name)}",
            *render_users(company.emailed_users, 0, "Users Emailed:"),
            *render_users(
                company.not_emailed_users, company.top_up, "Users Not Emailed:"
            ),
            f"{USER_INDENT}Total Top Ups for {display(company.name)}: "
            f"{display(total_top_up(company))}",
        ]
    except TypeError as e:
        raise ReportRenderError(company.id, str(e)) from e


def render_report(companies: Sequence[EnrichedCompany]) -> str:
    """Render the full report text, newline terminated, no trailing blank line."""
    lines: list[str] = []
    for index, company in enumerate(companies):
        if index:
            lines.append("")
        lines.extend(render_company(company))
    return "".join(f"{line}\n" for line in lines)


def write_report(companies: Sequence[EnrichedCompany], path: Path) -> Path | None:
    """
    Render companies and write the report file.

    Args:
        companies: Enriched companies in report order.
        path: Destination file; overwritten if it exists.

    Returns:
        The written path, or None if the file could not be written or the
        text is not encodable as UTF-8. The text is encoded before the file
        is opened, so a failure never leaves a truncated report behind.

    Raises:
        ReportRenderError: If a company block cannot be rendered. Nothing
            is written in that case.
    """
    text = render_report(companies)
    try:
        data = text.encode("utf-8")
        with path.open("wb") as f:
            f.write(data)
    except (OSError, UnicodeEncodeError) as e:
        log.error(
            "Unable to write report",
            path=str(path),
            detail=f"{type(e).__name__}: {e}",
        )
        return None

    log.info("Wrote report", path=str(path), companies=len(companies))
    return path
