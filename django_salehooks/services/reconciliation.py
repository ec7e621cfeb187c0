import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import IntegrityError, transaction
from django.utils import timezone

from django_salehooks.conf import settings
from django_salehooks.constants import CanonicalStatus
from django_salehooks.models import NotificationTemplate, Sale
from django_salehooks.normalization import NormalizedSale
from django_salehooks.signals import sale_created, sale_updated
from django_salehooks.tenants import TenantContext
from django_salehooks.utils import truncate

logger = logging.getLogger(__name__)

# Statuses whose first entry triggers a notification
NOTIFY_ON_STATUS = {
    CanonicalStatus.approved.value: NotificationTemplate.EventType.SALE_APPROVED,
    CanonicalStatus.pending.value: NotificationTemplate.EventType.SALE_PENDING,
    CanonicalStatus.refunded.value: NotificationTemplate.EventType.SALE_REFUNDED,
}

# Fields refreshed on update only when the new event carries a value
OPTIONAL_FIELDS = (
    "value",
    "net_value",
    "customer_name",
    "customer_email",
    "customer_phone",
    "customer_document",
    "payment_method",
    "product_name",
)

# Gateway-supplied text columns, truncated to fit
TEXT_FIELDS = (
    "status",
    "raw_status",
    "event_type",
    "customer_name",
    "customer_email",
    "customer_phone",
    "customer_document",
    "payment_method",
    "product_name",
)


@dataclass
class ReconcileOutcome:
    sale: Sale
    action: str
    previous_status: str | None = None
    notification: str | None = None

    @property
    def created(self) -> bool:
        return self.action == "created"


def notification_for(
    previous_status: str | None, new_status: str, history=()
) -> str | None:
    """
    Event type to notify for a status edge, or None.

    A repeated status never notifies; a new sale has no previous status.
    A status already present in the sale's history was notified on entry
    and does not notify again.
    """
    if previous_status == new_status:
        return None
    if any(entry.get("status") == new_status for entry in history):
        return None
    event_type = NOTIFY_ON_STATUS.get(new_status)
    return str(event_type) if event_type else None


class SaleReconciler:
    """
    Creates or updates the single Sale behind each (organization,
    transaction id, gateway) key.

    The lookup row is locked for the rest of the transaction, and the unique
    constraint on the key turns a lost insert race into an update.
    """

    @classmethod
    def reconcile(
        cls, tenant: TenantContext, normalized: NormalizedSale
    ) -> ReconcileOutcome:
        now = timezone.now()

        with transaction.atomic():
            sale = cls._find_locked(tenant, normalized)

            if sale is None:
                try:
                    with transaction.atomic():
                        sale = cls._create(tenant, normalized, now)
                except IntegrityError:
                    logger.info(
                        "[salehooks] Concurrent insert for %s:%s, retrying as update",
                        normalized.gateway,
                        normalized.transaction_id,
                    )
                    sale = cls._find_locked(tenant, normalized)
                    if sale is None:
                        raise
                else:
                    outcome = ReconcileOutcome(
                        sale=sale,
                        action="created",
                        notification=notification_for(None, sale.status),
                    )
                    transaction.on_commit(
                        lambda: sale_created.send(
                            sender=Sale, sale=sale, previous_status=None
                        )
                    )
                    logger.info(
                        "[salehooks] Created sale %s:%s with status %s",
                        sale.gateway,
                        sale.transaction_id,
                        sale.status,
                    )
                    return outcome

            previous_status = sale.status
            previous_history = list(sale.processing_history or [])
            cls._apply_update(sale, normalized, now)

            transaction.on_commit(
                lambda: sale_updated.send(
                    sender=Sale, sale=sale, previous_status=previous_status
                )
            )
            logger.info(
                "[salehooks] Updated sale %s:%s from %s to %s",
                sale.gateway,
                sale.transaction_id,
                previous_status,
                sale.status,
            )
            return ReconcileOutcome(
                sale=sale,
                action="updated",
                previous_status=previous_status,
                notification=notification_for(
                    previous_status, sale.status, previous_history
                ),
            )

    @classmethod
    def _find_locked(
        cls, tenant: TenantContext, normalized: NormalizedSale
    ) -> Sale | None:
        return (
            Sale.objects.select_for_update()
            .filter(
                organization_id=tenant.organization_id,
                transaction_id=normalized.transaction_id,
                gateway=normalized.gateway,
            )
            .first()
        )

    @classmethod
    def _create(
        cls, tenant: TenantContext, normalized: NormalizedSale, now: datetime
    ) -> Sale:
        return Sale.objects.create(
            organization_id=tenant.organization_id,
            transaction_id=normalized.transaction_id,
            gateway=normalized.gateway,
            **cls._text_fields(normalized),
            value=normalized.value,
            net_value=normalized.net_value,
            tracking=normalized.tracking,
            payload=normalized.payload,
            processing_history=[normalized.history_entry(now.isoformat())],
            received_at=now,
        )

    @classmethod
    def _apply_update(
        cls, sale: Sale, normalized: NormalizedSale, now: datetime
    ) -> None:
        history = list(sale.processing_history or [])
        history.append(normalized.history_entry(now.isoformat()))

        limit = settings.HISTORY_LIMIT
        if limit:
            history = history[-limit:]

        sale.processing_history = history
        sale.payload = normalized.payload

        text = cls._text_fields(normalized)
        for name in ("status", "raw_status", "event_type"):
            setattr(sale, name, text[name])

        for name in OPTIONAL_FIELDS:
            value = text.get(name, getattr(normalized, name))
            if value is not None:
                setattr(sale, name, value)

        if any(v for k, v in normalized.tracking.items() if k != "gateway"):
            sale.tracking = normalized.tracking

        sale.save()

    @staticmethod
    def _text_fields(normalized: NormalizedSale) -> dict[str, str | None]:
        """Gateway-supplied text, cut to the column widths of Sale."""
        return {
            name: truncate(
                getattr(normalized, name), Sale._meta.get_field(name).max_length
            )
            for name in TEXT_FIELDS
        }
