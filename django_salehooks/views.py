import json
import logging
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from django_salehooks.gateways import GatewayAdapter, get_gateway_adapter
from django_salehooks.services import (
    NotificationData,
    NotificationDispatcher,
    ReconcileOutcome,
    SaleReconciler,
    WebhookAuditLogger,
)
from django_salehooks.tenants import TenantContext, get_tenant_resolver
from django_salehooks.utils import headers_to_dict

logger = logging.getLogger(__name__)

ORGANIZATION_QUERY_PARAM = "org"
ORGANIZATION_HEADER = "X-Organization-Id"


def _liveness() -> JsonResponse:
    return JsonResponse({"message": "Webhook endpoint active. Send POST method."})


def _unauthorized() -> JsonResponse:
    return JsonResponse({"message": "Invalid organization"}, status=401)


def _parse_json_body(request: HttpRequest) -> tuple[Any, bool]:
    """
    Parse JSON body from request.

    Returns:
        (data, True) on success
        (decoded text, False) when the body is not JSON
    """
    raw = request.body.decode("utf-8", errors="replace")
    try:
        return json.loads(raw), True
    except json.JSONDecodeError:
        return raw, False


def _notify(tenant: TenantContext, outcome: ReconcileOutcome) -> None:
    # Dispatch problems are logged and dropped, the sale is already stored
    result = NotificationDispatcher().dispatch(
        tenant, outcome.notification, NotificationData.from_sale(outcome.sale)
    )
    if not result.ok:
        logger.warning(
            "[salehooks] Notification %s for sale %s not delivered: %s",
            result.event_type,
            outcome.sale.pk,
            result.error,
        )


def process_webhook_request(
    request: HttpRequest, adapter: GatewayAdapter, tenant: TenantContext
) -> JsonResponse:
    """Audit, validate, reconcile and notify one webhook delivery."""
    body, is_json = _parse_json_body(request)
    entry = None

    try:
        entry = WebhookAuditLogger.open(
            tenant, adapter.name, headers_to_dict(request), body
        )

        if is_json:
            validation = adapter.validate(body)
            errors = validation.errors
        else:
            validation = None
            errors = [{"type": "json_invalid", "loc": [], "msg": "Invalid JSON"}]

        if validation is None or not validation.valid:
            WebhookAuditLogger.mark_validation_error(entry, errors)
            return JsonResponse(
                {"message": "Invalid payload structure", "errors": errors},
                status=400,
            )

        normalized = adapter.build_sale(validation.data, body)
        outcome = SaleReconciler.reconcile(tenant, normalized)

        WebhookAuditLogger.mark_processed(
            entry,
            transaction_id=outcome.sale.transaction_id,
            action=outcome.action,
            missing_data=validation.missing_data,
        )

        if outcome.notification:
            _notify(tenant, outcome)
    except Exception as e:
        logger.exception("[salehooks] %s webhook processing failed", adapter.name)
        WebhookAuditLogger.mark_error(entry, str(e))
        return JsonResponse(
            {"message": f"Error processing webhook ({adapter.name})", "error": str(e)},
            status=500,
        )

    message = (
        f"Webhook ({adapter.name}) received and updated"
        if outcome.action == "updated"
        else f"Webhook ({adapter.name}) received"
    )
    return JsonResponse(
        {
            "message": message,
            "transactionId": outcome.sale.transaction_id,
            "action": outcome.action,
        }
    )


@csrf_exempt
@require_http_methods(["GET", "POST"])
def gateway_webhook(request, gateway):
    """Fixed per-gateway endpoint, tenant given as ?org=<organization id>."""
    if request.method == "GET":
        return _liveness()

    adapter = get_gateway_adapter(gateway)
    if adapter is None:
        return JsonResponse({"error": f"Gateway '{gateway}' not supported"}, status=400)

    identifier = request.GET.get(ORGANIZATION_QUERY_PARAM) or request.headers.get(
        ORGANIZATION_HEADER
    )
    tenant = get_tenant_resolver().resolve_id(identifier) if identifier else None
    if tenant is None:
        logger.warning("[salehooks] %s webhook with unknown organization", adapter.name)
        return _unauthorized()

    return process_webhook_request(request, adapter, tenant)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def webhook(request, gateway, org_secret):
    """Generalized endpoint, gateway and organization secret in the path."""
    if request.method == "GET":
        return _liveness()

    adapter = get_gateway_adapter(gateway)
    if adapter is None:
        return JsonResponse({"error": f"Gateway '{gateway}' not supported"}, status=400)

    tenant = get_tenant_resolver().resolve_secret(org_secret)
    if tenant is None:
        logger.warning("[salehooks] %s webhook with invalid secret", adapter.name)
        return _unauthorized()

    return process_webhook_request(request, adapter, tenant)
