"""Accommodations app package.

Accommodations, their rooms and room-type pricing tiers, and the per-day
markers (maintenance, informational price) hosts put on their calendars.
Publication status is managed by moderation outside this app.
"""
