"""Hostel mess package.

Meal eligibility and attendance for residents across several hostels, organized
by feature modules (assignments, menus, windows, tokens, attendance, stats)
with a thin Flask controller layer over service/repository layers.
"""
