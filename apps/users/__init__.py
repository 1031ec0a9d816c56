"""Users app package.

Defines the custom user model (email login) and the role model used by
the booking engine: platform super admins, per-hotel staff roles and
customers. Use ``apps.users.models.CustomUser`` as the AUTH_USER_MODEL
throughout the project.
"""
