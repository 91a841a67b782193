"""Attendance Tracker package.

Organized by feature modules (users, registrations, auth, notifications)
with a thin Flask controller layer over service/repository layers.
"""
