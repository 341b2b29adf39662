"""Guard Roster package.

This package is organized by feature modules (guards, schedules, slots,
absences) with a thin Flask controller layer and service/repository layers
sitting on top of a flat record store.
"""
