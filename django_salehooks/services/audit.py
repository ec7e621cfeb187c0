import logging
from typing import Any

from django.db import DatabaseError

from django_salehooks.models import WebhookRequest
from django_salehooks.tenants import TenantContext

logger = logging.getLogger(__name__)

Status = WebhookRequest.ProcessingStatus


class WebhookAuditLogger:
    """
    Records every inbound webhook delivery and its processing outcome.

    The pending entry is written before validation so the raw request can
    always be recovered, whatever happens afterwards.
    """

    @classmethod
    def open(
        cls,
        tenant: TenantContext,
        source: str,
        headers: dict[str, str],
        body: Any,
    ) -> WebhookRequest:
        entry = WebhookRequest.objects.create(
            organization_id=tenant.organization_id,
            source=source,
            headers=headers,
            body=body,
            processing_status=Status.PENDING,
        )
        logger.debug("[salehooks] Logged %s webhook request %s", source, entry.pk)
        return entry

    @classmethod
    def _update(cls, entry: WebhookRequest, **fields) -> None:
        for name, value in fields.items():
            setattr(entry, name, value)
        entry.save(update_fields=[*fields, "updated_at"])

    @classmethod
    def mark_validation_error(
        cls, entry: WebhookRequest, errors: list[dict], message: str = ""
    ) -> None:
        cls._update(
            entry,
            processing_status=Status.VALIDATION_ERROR,
            error_message=message or f"Invalid webhook payload: {len(errors)} error(s)",
            validation_errors=errors,
        )

    @classmethod
    def mark_processed(
        cls,
        entry: WebhookRequest,
        transaction_id: str,
        action: str,
        missing_data: bool = False,
    ) -> None:
        if missing_data:
            status, message = (
                Status.WARNING_MISSING_DATA,
                "Transaction ID or status unknown",
            )
        elif action == "updated":
            status, message = Status.SUCCESS_UPDATED, "Duplicate transaction updated"
        else:
            status, message = Status.SUCCESS, "Sale created"

        cls._update(
            entry,
            processing_status=status,
            transaction_id=transaction_id,
            message=message,
        )

    @classmethod
    def mark_error(cls, entry: WebhookRequest | None, error_message: str) -> None:
        """Best-effort: the request is failing already, so never raise here."""
        if entry is None:
            return
        try:
            cls._update(
                entry,
                processing_status=Status.ERROR,
                error_message=error_message,
            )
        except DatabaseError:
            logger.exception(
                "[salehooks] Failed to update webhook request %s to error status",
                entry.pk,
            )
