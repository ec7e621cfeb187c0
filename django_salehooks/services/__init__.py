from .audit import WebhookAuditLogger
from .notifications import DispatchResult, NotificationData, NotificationDispatcher
from .reconciliation import ReconcileOutcome, SaleReconciler

__all__ = [
    "DispatchResult",
    "NotificationData",
    "NotificationDispatcher",
    "ReconcileOutcome",
    "SaleReconciler",
    "WebhookAuditLogger",
]
