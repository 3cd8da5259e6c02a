"""Finances app package.

Commission on paid bookings: the platform rate, the per-booking
platform/host split and revenue statistics built on it.
"""
