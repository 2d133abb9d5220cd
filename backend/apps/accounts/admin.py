"""Admin configuration for accounts app."""

from django.contrib import admin

from apps.accounts.models import Member, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin for User model."""

    list_display = ["email", "name", "is_active", "is_staff", "created_at"]
    list_filter = ["is_active", "is_staff"]
    search_fields = ["email", "name"]
    readonly_fields = ["created_at", "updated_at", "last_login"]
    exclude = ["password"]
    ordering = ["-created_at"]


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    """Admin for Member model."""

    list_display = ["user", "organization", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["user__email", "organization__name", "organization__slug"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]
