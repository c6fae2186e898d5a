import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CatalogEntity",
            fields=[
                (
                    "entity_id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("business_id", models.UUIDField(db_index=True)),
                ("entity_schema", models.CharField(max_length=63)),
                ("entity_type", models.CharField(max_length=63)),
                ("display_format", models.JSONField(blank=True, null=True)),
                ("max_counter", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "entity_ids_catalog_entities",
                "ordering": ["business_id", "entity_schema", "entity_type"],
            },
        ),
        migrations.AddConstraint(
            model_name="catalogentity",
            constraint=models.UniqueConstraint(
                fields=("business_id", "entity_schema", "entity_type"),
                name="uq_catalog_entity_business_schema_type",
            ),
        ),
    ]
