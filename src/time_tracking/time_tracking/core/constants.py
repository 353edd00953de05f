"""Constants and defaults."""

PIN_PATTERN = r"^\d{4,8}$"

DEFAULT_WEEK_START_DAY = 0
RECENT_ENTRIES_LIMIT = 500
RECENT_AUDITS_LIMIT = 500

ADMIN_COOKIE_NAME = "tt_admin"

SETTING_WEEK_START_DAY = "week_start_day"
SETTING_TIMEZONE = "timezone"
SETTING_EMAIL_RECIPIENT = "email_report_recipient"
SETTING_EMAIL_BODY = "email_report_body"

SNAPSHOT_FILENAME = "timetracking.sql"

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
