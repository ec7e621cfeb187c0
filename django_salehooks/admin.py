import json
import logging

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest
from django.urls import NoReverseMatch, reverse
from django.utils.html import format_html, format_html_join
from django.utils.translation import gettext_lazy as _

from django_salehooks.gateways import available_gateways
from django_salehooks.models import (
    DeviceProfile,
    Notification,
    NotificationTemplate,
    Organization,
    Sale,
    WebhookRequest,
    generate_webhook_secret,
)
from django_salehooks.utils import format_currency

logger = logging.getLogger(__name__)


def _json_block(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, str):
        return format_html("<pre>{}</pre>", value)
    return format_html("<pre>{}</pre>", json.dumps(value, indent=2, ensure_ascii=False))


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "is_active",
        "currency",
        "locale",
        "sale_count",
        "created_at",
    )
    list_filter = ("is_active",)
    search_fields = ("name", "id")
    ordering = ["name"]
    readonly_fields = ("id", "webhook_urls", "created_at", "updated_at")

    fieldsets = (
        (
            _("Organization"),
            {"fields": ("id", "name", "is_active", "currency", "locale")},
        ),
        (
            _("Webhooks"),
            {"fields": ("webhook_secret", "webhook_urls")},
        ),
        (
            _("Timestamps"),
            {"classes": ("collapse",), "fields": ("created_at", "updated_at")},
        ),
    )

    actions = ["rotate_webhook_secret"]

    @admin.display(description=_("Sales"))
    def sale_count(self, obj: Organization) -> int:
        if not obj.pk:
            return 0
        return obj.sales.count()

    @admin.display(description=_("Webhook URLs"))
    def webhook_urls(self, obj: Organization) -> str:
        if not obj.pk or not obj.webhook_secret:
            return "-"

        items = []
        for slug in available_gateways():
            try:
                url = reverse(
                    "django_salehooks:webhook",
                    kwargs={"gateway": slug, "org_secret": obj.webhook_secret},
                )
            except NoReverseMatch:
                return "-"
            items.append((slug, url))

        return format_html(
            "<ul>{}</ul>",
            format_html_join("", "<li>{}: <code>{}</code></li>", items),
        )

    @admin.action(description=_("Rotate webhook secret"))
    def rotate_webhook_secret(
        self, request: HttpRequest, queryset: QuerySet[Organization]
    ) -> None:
        count = 0
        for organization in queryset:
            organization.webhook_secret = generate_webhook_secret()
            organization.save(update_fields=["webhook_secret", "updated_at"])
            logger.info(
                "[salehooks] Admin rotated webhook secret of organization %s",
                organization.pk,
            )
            count += 1
        self.message_user(
            request,
            _("Rotated webhook secret of %(count)d organization(s).")
            % {"count": count},
            messages.SUCCESS,
        )


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "transaction_id",
        "gateway",
        "display_status_colored",
        "display_value",
        "customer_name",
        "organization",
        "updated_at",
    )
    list_display_links = ("transaction_id",)
    list_filter = ("status", "gateway", "created_at")
    search_fields = (
        "transaction_id",
        "customer_name",
        "customer_email",
        "customer_phone",
        "product_name",
    )
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            _("Transaction Information"),
            {
                "fields": (
                    "organization",
                    "transaction_id",
                    "gateway",
                    "status",
                    "raw_status",
                    "event_type",
                    "received_at",
                    "created_at",
                    "updated_at",
                )
            },
        ),
        (
            _("Financial Details"),
            {"fields": ("value", "net_value", "payment_method", "product_name")},
        ),
        (
            _("Customer Information"),
            {
                "fields": (
                    "customer_name",
                    "customer_email",
                    "customer_phone",
                    "customer_document",
                )
            },
        ),
        (
            _("Processing History"),
            {"fields": ("history_timeline",)},
        ),
        (
            _("Tracking & Payload"),
            {
                "classes": ("collapse",),
                "fields": ("tracking_display", "payload_display"),
            },
        ),
    )

    readonly_fields = (
        "organization",
        "transaction_id",
        "gateway",
        "status",
        "raw_status",
        "event_type",
        "received_at",
        "created_at",
        "updated_at",
        "value",
        "net_value",
        "payment_method",
        "product_name",
        "customer_name",
        "customer_email",
        "customer_phone",
        "customer_document",
        "history_timeline",
        "tracking_display",
        "payload_display",
    )

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(
        self, request: HttpRequest, obj: Sale | None = None
    ) -> bool:
        return False

    @admin.display(description=_("Status"), ordering="status")
    def display_status_colored(self, obj: Sale) -> str:
        colors = {
            Sale.Status.APPROVED: "green",
            Sale.Status.PENDING: "orange",
            Sale.Status.REFUSED: "red",
            Sale.Status.REFUNDED: "purple",
            Sale.Status.CHARGEBACK: "red",
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, "gray"),
            obj.status,
        )

    @admin.display(description=_("Value"), ordering="value")
    def display_value(self, obj: Sale) -> str:
        organization = obj.organization
        return format_currency(
            obj.value,
            organization.currency or "BRL",
            organization.locale or "pt_BR",
        )

    @admin.display(description=_("Events"))
    def history_timeline(self, obj: Sale) -> str:
        if not obj.processing_history:
            return _("No events")

        items = [
            (
                entry.get("timestamp", ""),
                entry.get("eventType") or "-",
                entry.get("status", ""),
                entry.get("rawStatus") or "-",
            )
            for entry in obj.processing_history
        ]
        return format_html(
            "<ol>{}</ol>",
            format_html_join("", "<li>{} {}: {} ({})</li>", items),
        )

    @admin.display(description=_("Tracking"))
    def tracking_display(self, obj: Sale) -> str:
        return _json_block(obj.tracking)

    @admin.display(description=_("Payload (JSON)"))
    def payload_display(self, obj: Sale) -> str:
        return _json_block(obj.payload)

    def get_queryset(self, request: HttpRequest) -> QuerySet[Sale]:
        qs = super().get_queryset(request)
        return qs.select_related("organization")


@admin.register(WebhookRequest)
class WebhookRequestAdmin(admin.ModelAdmin):
    list_display = (
        "received_at",
        "source",
        "processing_status",
        "transaction_id",
        "organization",
        "message",
    )
    list_filter = ("processing_status", "source", "received_at")
    search_fields = ("transaction_id", "message", "error_message")
    date_hierarchy = "received_at"
    ordering = ["-received_at"]

    fields = (
        "id",
        "organization",
        "source",
        "processing_status",
        "transaction_id",
        "message",
        "error_message",
        "validation_errors_display",
        "headers_display",
        "body_display",
        "received_at",
        "updated_at",
    )
    readonly_fields = fields

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(
        self, request: HttpRequest, obj: WebhookRequest | None = None
    ) -> bool:
        return False

    @admin.display(description=_("Validation errors"))
    def validation_errors_display(self, obj: WebhookRequest) -> str:
        return _json_block(obj.validation_errors)

    @admin.display(description=_("Headers"))
    def headers_display(self, obj: WebhookRequest) -> str:
        return _json_block(obj.headers)

    @admin.display(description=_("Body"))
    def body_display(self, obj: WebhookRequest) -> str:
        return _json_block(obj.body)

    def get_queryset(self, request: HttpRequest) -> QuerySet[WebhookRequest]:
        qs = super().get_queryset(request)
        return qs.select_related("organization")


@admin.register(NotificationTemplate)
class NotificationTemplateAdmin(admin.ModelAdmin):
    list_display = ("organization", "event_type", "title", "enabled", "updated_at")
    list_filter = ("event_type", "enabled")
    search_fields = ("organization__name", "title", "message")


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("created_at", "organization", "type", "title", "read")
    list_filter = ("type", "read")
    search_fields = ("title", "message")
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    readonly_fields = ("created_at",)


@admin.register(DeviceProfile)
class DeviceProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "token_count", "updated_at")
    search_fields = ("name", "organization__name")

    @admin.display(description=_("Push tokens"))
    def token_count(self, obj: DeviceProfile) -> int:
        return len(obj.push_tokens or [])
