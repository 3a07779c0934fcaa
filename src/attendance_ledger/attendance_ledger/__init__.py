"""Attendance Ledger package.

Organized by feature modules (attendance, employees, photos, ...) with a thin
Flask controller layer over service/repository layers. The attendance module
holds the lateness rule, the per-day ledger write path, the monthly
reconstruction and the daily stats.
"""
