"""Event Work-Hours package.

Organized by feature modules (tokens, assignments, work_sessions, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
