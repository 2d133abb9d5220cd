"""Admin configuration for organizations app."""

from django.contrib import admin

from apps.organizations.models import Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin for Organization model."""

    list_display = [
        "name",
        "slug",
        "external_org_id",
        "subscription_plan",
        "custom_domain",
        "domain_verified",
        "created_at",
    ]
    list_filter = ["subscription_plan", "domain_verified"]
    search_fields = ["name", "slug", "external_org_id", "custom_domain"]
    readonly_fields = [
        "external_org_id",
        "domain_verification_token",
        "domain_token_expires_at",
        "domain_verified_at",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]
