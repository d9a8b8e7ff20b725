# users/apps.py

"""
USERS APP CONFIG

Actor identity for every ledger write:
- custom email-based User (UUID primary key)
- JWT auth (SimpleJWT) + /auth/me/
"""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
    verbose_name = "Users"
