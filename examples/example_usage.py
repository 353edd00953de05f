"""Example: use the service layer without Flask.

Controllers are thin; the weekly aggregation lives in WeeklyReportService.
"""

import importlib

from config import get_settings_module

from src.time_tracking.time_tracking.container import build_container
from src.time_tracking.time_tracking.reports.email import build_report_body


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        secret_key=settings.SECRET_KEY,
        export_in_background=False,
        default_timezone=getattr(settings, "DEFAULT_TIMEZONE", None),
    )
    report = container.report_service.build_weekly_report()
    print(build_report_body(report))
    for row in report.rows:
        flags = ["over" if over else "" for over in row.over_by_day]
        print(row.user_name, dict(zip(report.day_labels, row.actual_by_day)), flags, row.estimated_pay)


if __name__ == "__main__":
    main()
