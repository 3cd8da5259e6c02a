"""Users app package.

Defines the platform user with a role (guest, host, admin) and the
capability set derived from it. ``apps.users.models.CustomUser`` is the
AUTH_USER_MODEL throughout the project.
"""
