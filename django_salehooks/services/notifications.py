import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django_salehooks.constants import (
    DEFAULT_CUSTOMER_NAME,
    DEFAULT_PRODUCT_NAME,
    PLACEHOLDER_CUSTOMER,
    PLACEHOLDER_GATEWAY,
    PLACEHOLDER_PRODUCT,
    PLACEHOLDER_VALUE,
)
from django_salehooks.exceptions import PushTransportError
from django_salehooks.models import Notification, Sale
from django_salehooks.push import PushResult, PushTransport, get_push_transport
from django_salehooks.signals import notification_dispatched
from django_salehooks.stores import DeviceTokenStore, TemplateStore
from django_salehooks.tenants import TenantContext
from django_salehooks.utils import format_currency, interpolate, truncate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationData:
    customer_name: str | None = None
    value: Decimal | None = None
    product_name: str | None = None
    gateway: str | None = None
    transaction_id: str | None = None

    @classmethod
    def from_sale(cls, sale: Sale) -> "NotificationData":
        return cls(
            customer_name=sale.customer_name,
            value=sale.value,
            product_name=sale.product_name,
            gateway=sale.gateway,
            transaction_id=sale.transaction_id,
        )

    def as_metadata(self) -> dict:
        return {
            "customerName": self.customer_name,
            "value": str(self.value) if self.value is not None else None,
            "productName": self.product_name,
            "gateway": self.gateway,
            "transactionId": self.transaction_id,
        }


@dataclass
class PushOutcome:
    attempted: int = 0
    success_count: int = 0
    failure_count: int = 0
    pruned_tokens: list[str] = field(default_factory=list)


@dataclass
class DispatchResult:
    """
    Outcome of one dispatch. Failures are reported here and never raised.

    status is one of: sent, no_tokens, disabled, failed.
    """

    status: str
    event_type: str
    notification: Notification | None = None
    push: PushOutcome | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


class NotificationDispatcher:
    def __init__(
        self,
        transport: PushTransport | None = None,
        templates: TemplateStore | None = None,
        devices: DeviceTokenStore | None = None,
    ):
        self._transport = transport
        self.templates = templates or TemplateStore()
        self.devices = devices or DeviceTokenStore()

    @property
    def transport(self) -> PushTransport:
        if self._transport is None:
            self._transport = get_push_transport()
        return self._transport

    def dispatch(
        self, tenant: TenantContext, event_type: str, data: NotificationData
    ) -> DispatchResult:
        try:
            result = self._dispatch(tenant, event_type, data)
            if result.notification is not None:
                notification_dispatched.send(
                    sender=Notification, notification=result.notification, result=result
                )
        except Exception as e:
            logger.exception(
                "[salehooks] Failed to send %s notification for organization %s",
                event_type,
                tenant.organization_id,
            )
            return DispatchResult(status="failed", event_type=event_type, error=str(e))

        return result

    def _dispatch(
        self, tenant: TenantContext, event_type: str, data: NotificationData
    ) -> DispatchResult:
        template = self.templates.load(tenant, event_type)
        if not template.enabled:
            logger.info(
                "[salehooks] Notification %s is disabled for organization %s",
                event_type,
                tenant.organization_id,
            )
            return DispatchResult(status="disabled", event_type=event_type)

        variables = {
            PLACEHOLDER_VALUE: format_currency(
                data.value, tenant.currency, tenant.locale
            ),
            PLACEHOLDER_CUSTOMER: data.customer_name or DEFAULT_CUSTOMER_NAME,
            PLACEHOLDER_PRODUCT: data.product_name or DEFAULT_PRODUCT_NAME,
            PLACEHOLDER_GATEWAY: data.gateway or "",
        }
        title = truncate(
            interpolate(template.title, variables),
            Notification._meta.get_field("title").max_length,
        )
        message = interpolate(template.message, variables)

        notification = Notification.objects.create(
            organization_id=tenant.organization_id,
            title=title,
            message=message,
            type=f"webhook_{event_type}",
            metadata={**data.as_metadata(), "originalType": event_type},
        )

        push = self.push_to_tenant(
            tenant,
            title,
            message,
            data={"type": event_type, "transactionId": data.transaction_id or ""},
        )
        status = "sent" if push.attempted else "no_tokens"
        return DispatchResult(
            status=status, event_type=event_type, notification=notification, push=push
        )

    def push_to_tenant(
        self, tenant: TenantContext, title: str, body: str, data: dict | None = None
    ) -> PushOutcome:
        """
        Send one push to every device token of the tenant, then prune the
        tokens the transport reported as permanently invalid.

        When the transport fails partway, dead tokens from the batches it did
        deliver are still pruned before the error propagates.
        """
        tokens = self.devices.distinct_tokens(tenant)
        if not tokens:
            logger.info(
                "[salehooks] No device tokens for organization %s, push skipped",
                tenant.organization_id,
            )
            return PushOutcome()

        try:
            results = self.transport.send(tokens, title, body, data)
        except PushTransportError as e:
            self._tally(tenant, e.results, PushOutcome(attempted=len(tokens)))
            raise

        return self._tally(tenant, results, PushOutcome(attempted=len(tokens)))

    def _tally(
        self, tenant: TenantContext, results: list[PushResult], outcome: PushOutcome
    ) -> PushOutcome:
        for result in results:
            if result.success:
                outcome.success_count += 1
                continue
            outcome.failure_count += 1
            if result.token_is_dead:
                outcome.pruned_tokens.append(result.token)
            else:
                logger.warning(
                    "[salehooks] Push to token %s... failed with %s, keeping token",
                    result.token[:12],
                    result.error_code,
                )

        if outcome.pruned_tokens:
            self.devices.prune(tenant, outcome.pruned_tokens)

        return outcome
