from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from ..core.constants import WEEKDAY_NAMES
from ..settings.model import EmailReportSettings
from .service import WeeklyReport

EMAIL_SUBJECT = "Weekly Timesheet"
DEFAULT_EMAIL_BODY = "Weekly timesheet summary"


def week_label(report: WeeklyReport) -> str:
    fmt = "%b %d, %Y"
    return f"{report.start.strftime(fmt)} - {report.end.strftime(fmt)}"


def build_report_body(report: WeeklyReport, body: Optional[str] = None) -> str:
    lines = [
        body or DEFAULT_EMAIL_BODY,
        "",
        f"Week ({WEEKDAY_NAMES[report.week_start_day]} start): {week_label(report)}",
        "",
    ]
    lines.extend(f"{r.user_name}: {r.total_hours:.2f} hours" for r in report.rows)
    lines.extend(["", "-- Time Tracking"])
    return "\n".join(lines)


def build_mailto(report: WeeklyReport, settings: EmailReportSettings) -> str:
    """mailto: link for the admin "Email report" button (presentation only)."""
    recipient = quote(settings.recipient or "", safe="@.+-_")
    subject = quote(EMAIL_SUBJECT)
    body = quote(build_report_body(report, settings.body))
    return f"mailto:{recipient}?subject={subject}&body={body}"
