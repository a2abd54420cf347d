"""Attendance Tracker package.

Organized by feature modules (attendance, overtime, mpl, payroll, ...) with a
thin Flask controller layer over service/repository layers. The time and
overtime accounting rules live in the services and never touch Flask or MySQL
directly.
"""
