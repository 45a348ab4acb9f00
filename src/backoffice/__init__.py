"""Back-office accounting core.

This package is organized by feature modules (attendance, payroll, charity, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
