"""Sync app configuration."""

from django.apps import AppConfig


class SyncConfig(AppConfig):
    """Django app configuration for the directory sync ledger."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.sync"
    verbose_name = "Directory Sync"
