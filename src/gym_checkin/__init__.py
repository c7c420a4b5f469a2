"""Gym check-in package.

Organized by feature modules (members, users, notifications, attendance)
over a dual-mode persistence layer: MySQL first, process-local record store
as fallback.
"""
