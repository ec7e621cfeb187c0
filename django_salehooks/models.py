import secrets
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def generate_webhook_secret() -> str:
    return secrets.token_urlsafe(24)


class Organization(models.Model):
    """
    Minimal tenant record used by the default tenant resolver.

    Host projects owning their own tenant model can swap the resolver via
    SALEHOOKS_TENANT_RESOLVER and leave this table empty.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    webhook_secret = models.CharField(
        max_length=64,
        unique=True,
        default=generate_webhook_secret,
        help_text=_("Secret embedded in webhook URLs to identify the organization"),
    )
    currency = models.CharField(max_length=3, blank=True)
    locale = models.CharField(max_length=10, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "salehooks_organization"
        verbose_name = _("Organization")
        verbose_name_plural = _("Organizations")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Sale(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REFUSED = "refused", _("Refused")
        REFUNDED = "refunded", _("Refunded")
        CHARGEBACK = "chargeback", _("Chargeback")
        UNKNOWN = "unknown", _("Unknown")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)

    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="sales"
    )

    # Dedup key, together with organization
    transaction_id = models.CharField(
        max_length=255, help_text=_("Transaction identifier assigned by the gateway")
    )
    gateway = models.CharField(max_length=32, db_index=True)

    # Canonical status; unmapped gateway tokens are stored as received
    status = models.CharField(
        max_length=64,
        choices=Status.choices,
        default=Status.UNKNOWN,
        db_index=True,
    )
    raw_status = models.CharField(
        max_length=64, blank=True, help_text=_("Status token sent by the gateway")
    )
    event_type = models.CharField(max_length=64, blank=True)

    customer_name = models.CharField(max_length=255, blank=True, null=True)
    customer_email = models.CharField(max_length=255, blank=True, null=True)
    customer_phone = models.CharField(max_length=64, blank=True, null=True)
    customer_document = models.CharField(max_length=64, blank=True, null=True)

    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        blank=True,
        null=True,
        help_text=_("Sale value in major currency units"),
    )
    net_value = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True
    )
    payment_method = models.CharField(max_length=64, blank=True, null=True)
    product_name = models.CharField(max_length=255, blank=True, null=True)

    tracking = models.JSONField(default=dict, blank=True)

    # Last received body, replaced on every event
    payload = models.JSONField(default=dict, blank=True)
    processing_history = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    received_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "salehooks_sale"
        verbose_name = _("Sale")
        verbose_name_plural = _("Sales")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "transaction_id", "gateway"],
                name="salehooks_sale_dedup_key",
            ),
        ]
        indexes = [
            models.Index(fields=["-created_at"], name="salehooks_sale_created_idx"),
            models.Index(
                fields=["organization", "status", "-created_at"],
                name="salehooks_sale_status_idx",
            ),
        ]

    def __str__(self):
        return f"{self.gateway}:{self.transaction_id}"

    @property
    def is_approved(self) -> bool:
        return self.status == self.Status.APPROVED


class WebhookRequest(models.Model):
    """
    Audit record of one inbound webhook delivery.
    """

    class ProcessingStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        SUCCESS = "success", _("Success")
        SUCCESS_UPDATED = "success_updated", _("Success (updated)")
        VALIDATION_ERROR = "validation_error", _("Validation Error")
        WARNING_MISSING_DATA = "warning_missing_data", _("Warning: Missing Data")
        ERROR = "error", _("Error")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="webhook_requests",
    )
    source = models.CharField(
        max_length=32, db_index=True, help_text=_("Gateway the request came from")
    )

    headers = models.JSONField(default=dict)
    body = models.JSONField(null=True, blank=True)

    processing_status = models.CharField(
        max_length=32,
        choices=ProcessingStatus.choices,
        default=ProcessingStatus.PENDING,
        db_index=True,
    )
    message = models.CharField(max_length=255, blank=True)
    error_message = models.TextField(blank=True)
    validation_errors = models.JSONField(null=True, blank=True)
    transaction_id = models.CharField(max_length=255, blank=True)

    received_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "salehooks_webhook_request"
        verbose_name = _("Webhook Request")
        verbose_name_plural = _("Webhook Requests")
        ordering = ["-received_at"]
        indexes = [
            models.Index(
                fields=["-received_at"], name="salehooks_request_received_idx"
            ),
            models.Index(
                fields=["source", "processing_status"],
                name="salehooks_request_status_idx",
            ),
        ]

    def __str__(self):
        return f"{self.source} ({self.processing_status})"


class NotificationTemplate(models.Model):
    class EventType(models.TextChoices):
        SALE_APPROVED = "sale_approved", _("Sale approved")
        SALE_PENDING = "sale_pending", _("Sale pending")
        SALE_REFUNDED = "sale_refunded", _("Sale refunded")

    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="notification_templates"
    )
    event_type = models.CharField(max_length=32, choices=EventType.choices)

    # Blank fields fall back to the built-in default for the event type
    title = models.CharField(max_length=255, blank=True)
    message = models.TextField(
        blank=True,
        help_text=_("Placeholders: {valor}, {cliente}, {produto}, {gateway}"),
    )
    enabled = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "salehooks_notification_template"
        verbose_name = _("Notification Template")
        verbose_name_plural = _("Notification Templates")
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "event_type"],
                name="salehooks_template_per_event",
            ),
        ]

    def __str__(self):
        return f"{self.organization} - {self.event_type}"


class Notification(models.Model):
    """In-app notification written on every dispatched event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)

    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="notifications"
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=64, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)
    read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "salehooks_notification"
        verbose_name = _("Notification")
        verbose_name_plural = _("Notifications")
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class DeviceProfile(models.Model):
    """
    Profile holding the push tokens registered by one user's devices.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)

    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="device_profiles"
    )
    name = models.CharField(max_length=255, blank=True)
    push_tokens = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "salehooks_device_profile"
        verbose_name = _("Device Profile")
        verbose_name_plural = _("Device Profiles")
        ordering = ["-created_at"]

    def __str__(self):
        return self.name or str(self.id)
