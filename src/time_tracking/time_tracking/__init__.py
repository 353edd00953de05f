"""Time Tracking package.

Employees clock in/out from a shared PIN pad; an admin reviews entries,
manages employees and configures schedules. Organized by feature modules
(users, time_entries, schedules, settings, reports) with a thin Flask
controller layer over service and repository layers.
"""
