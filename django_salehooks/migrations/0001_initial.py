# Generated manually for v0.1.0

import uuid

import django.db.models.deletion
from django.db import migrations, models

import django_salehooks.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "webhook_secret",
                    models.CharField(
                        default=django_salehooks.models.generate_webhook_secret,
                        help_text="Secret embedded in webhook URLs to identify the organization",
                        max_length=64,
                        unique=True,
                    ),
                ),
                ("currency", models.CharField(blank=True, max_length=3)),
                ("locale", models.CharField(blank=True, max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Organization",
                "verbose_name_plural": "Organizations",
                "db_table": "salehooks_organization",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Sale",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, primary_key=True, serialize=False
                    ),
                ),
                (
                    "transaction_id",
                    models.CharField(
                        help_text="Transaction identifier assigned by the gateway",
                        max_length=255,
                    ),
                ),
                ("gateway", models.CharField(db_index=True, max_length=32)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("refused", "Refused"),
                            ("refunded", "Refunded"),
                            ("chargeback", "Chargeback"),
                            ("unknown", "Unknown"),
                        ],
                        db_index=True,
                        default="unknown",
                        max_length=64,
                    ),
                ),
                (
                    "raw_status",
                    models.CharField(
                        blank=True,
                        help_text="Status token sent by the gateway",
                        max_length=64,
                    ),
                ),
                ("event_type", models.CharField(blank=True, max_length=64)),
                (
                    "customer_name",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "customer_email",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "customer_phone",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                (
                    "customer_document",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                (
                    "value",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Sale value in major currency units",
                        max_digits=12,
                        null=True,
                    ),
                ),
                (
                    "net_value",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=12, null=True
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                (
                    "product_name",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("tracking", models.JSONField(blank=True, default=dict)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("processing_history", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("received_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sales",
                        to="django_salehooks.organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale",
                "verbose_name_plural": "Sales",
                "db_table": "salehooks_sale",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["-created_at"], name="salehooks_sale_created_idx"
                    ),
                    models.Index(
                        fields=["organization", "status", "-created_at"],
                        name="salehooks_sale_status_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("organization", "transaction_id", "gateway"),
                        name="salehooks_sale_dedup_key",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="WebhookRequest",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, primary_key=True, serialize=False
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        db_index=True,
                        help_text="Gateway the request came from",
                        max_length=32,
                    ),
                ),
                ("headers", models.JSONField(default=dict)),
                ("body", models.JSONField(blank=True, null=True)),
                (
                    "processing_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("success", "Success"),
                            ("success_updated", "Success (updated)"),
                            ("validation_error", "Validation Error"),
                            ("warning_missing_data", "Warning: Missing Data"),
                            ("error", "Error"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=32,
                    ),
                ),
                ("message", models.CharField(blank=True, max_length=255)),
                ("error_message", models.TextField(blank=True)),
                ("validation_errors", models.JSONField(blank=True, null=True)),
                ("transaction_id", models.CharField(blank=True, max_length=255)),
                ("received_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="webhook_requests",
                        to="django_salehooks.organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Webhook Request",
                "verbose_name_plural": "Webhook Requests",
                "db_table": "salehooks_webhook_request",
                "ordering": ["-received_at"],
                "indexes": [
                    models.Index(
                        fields=["-received_at"],
                        name="salehooks_request_received_idx",
                    ),
                    models.Index(
                        fields=["source", "processing_status"],
                        name="salehooks_request_status_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="NotificationTemplate",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("sale_approved", "Sale approved"),
                            ("sale_pending", "Sale pending"),
                            ("sale_refunded", "Sale refunded"),
                        ],
                        max_length=32,
                    ),
                ),
                ("title", models.CharField(blank=True, max_length=255)),
                (
                    "message",
                    models.TextField(
                        blank=True,
                        help_text="Placeholders: {valor}, {cliente}, {produto}, {gateway}",
                    ),
                ),
                ("enabled", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notification_templates",
                        to="django_salehooks.organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification Template",
                "verbose_name_plural": "Notification Templates",
                "db_table": "salehooks_notification_template",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("organization", "event_type"),
                        name="salehooks_template_per_event",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, primary_key=True, serialize=False
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("type", models.CharField(db_index=True, max_length=64)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to="django_salehooks.organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "db_table": "salehooks_notification",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="DeviceProfile",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=255)),
                ("push_tokens", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="device_profiles",
                        to="django_salehooks.organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "Device Profile",
                "verbose_name_plural": "Device Profiles",
                "db_table": "salehooks_device_profile",
                "ordering": ["-created_at"],
            },
        ),
    ]
