from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SyncState",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "entity_type",
                    models.CharField(
                        choices=[
                            ("organization", "Organization"),
                            ("member", "Member"),
                            ("user", "User"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "entity_id",
                    models.CharField(help_text="Local primary key of the entity", max_length=64),
                ),
                (
                    "external_id",
                    models.CharField(
                        blank=True,
                        help_text="Identity Directory id (organization id, or user id for members)",
                        max_length=255,
                    ),
                ),
                (
                    "sync_status",
                    models.CharField(
                        choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("sync_error", models.TextField(blank=True)),
                ("last_synced_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-last_synced_at"],
                "indexes": [
                    models.Index(
                        fields=["sync_status", "entity_type"], name="sync_state_status_type_idx"
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("entity_type", "entity_id"), name="unique_sync_state_per_entity"
                    )
                ],
            },
        ),
    ]
