from enum import Enum

UNKNOWN_TRANSACTION_ID = "unknown_id"
UNKNOWN_STATUS = "unknown"

DEFAULT_CUSTOMER_NAME = "Cliente anônimo"
DEFAULT_PRODUCT_NAME = "Produto"
MISSING_VALUE_LABEL = "valor não informado"


class CanonicalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    refused = "refused"
    refunded = "refunded"
    chargeback = "chargeback"
    unknown = "unknown"


class AmountUnit(str, Enum):
    cents = "cents"
    major = "major"


# Gateway status vocabulary shared by every adapter. Adapters may extend it.
STATUS_MAP = {
    "paid": CanonicalStatus.approved,
    "approved": CanonicalStatus.approved,
    "confirmed": CanonicalStatus.approved,
    "completed": CanonicalStatus.approved,
    "authorized": CanonicalStatus.approved,
    "pending": CanonicalStatus.pending,
    "waiting_payment": CanonicalStatus.pending,
    "processing": CanonicalStatus.pending,
    "waiting": CanonicalStatus.pending,
    "refused": CanonicalStatus.refused,
    "declined": CanonicalStatus.refused,
    "failed": CanonicalStatus.refused,
    "canceled": CanonicalStatus.refused,
    "cancelled": CanonicalStatus.refused,
    "antifraud": CanonicalStatus.refused,
    "refunded": CanonicalStatus.refunded,
    "refund": CanonicalStatus.refunded,
    "chargeback": CanonicalStatus.chargeback,
    "chargedback": CanonicalStatus.chargeback,
    "dispute": CanonicalStatus.chargeback,
    "unknown": CanonicalStatus.unknown,
}

TRACKING_FIELDS = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_content",
    "utm_term",
)

# Template placeholders substituted at send time
PLACEHOLDER_VALUE = "valor"
PLACEHOLDER_CUSTOMER = "cliente"
PLACEHOLDER_PRODUCT = "produto"
PLACEHOLDER_GATEWAY = "gateway"

DEFAULT_TEMPLATES = {
    "sale_approved": {
        "title": "💸 Pagamento Confirmado!",
        "message": "Venda de {valor} para {cliente} confirmada!",
        "enabled": True,
    },
    "sale_pending": {
        "title": "⏳ Pagamento Pendente",
        "message": "Pagamento de {valor} para {cliente} aguardando.",
        "enabled": True,
    },
    "sale_refunded": {
        "title": "🔄 Reembolso Processado",
        "message": "Reembolso de {valor} para {cliente} realizado.",
        "enabled": True,
    },
}

# Push error codes after which a device token will never be deliverable again
TOKEN_NOT_REGISTERED = "registration-token-not-registered"
TOKEN_INVALID = "invalid-registration-token"
PERMANENT_TOKEN_ERRORS = frozenset({TOKEN_NOT_REGISTERED, TOKEN_INVALID})

# INVALID_ARGUMENT that is not about the token, e.g. an oversized payload
INVALID_ARGUMENT = "invalid-argument"
# Lowercased fragment of FCM's error text for a malformed registration token
INVALID_TOKEN_MESSAGE = "registration token"

# FCM rejects multicast messages with more tokens than this
FCM_MULTICAST_LIMIT = 500

# Currency symbol and separators per locale
LOCALE_FORMATS = {
    "pt_BR": {"thousands": ".", "decimal": ",", "pattern": "{symbol} {amount}"},
    "en_US": {"thousands": ",", "decimal": ".", "pattern": "{symbol}{amount}"},
    "es_ES": {"thousands": ".", "decimal": ",", "pattern": "{amount} {symbol}"},
}

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
}
