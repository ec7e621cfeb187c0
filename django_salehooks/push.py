"""
Push delivery transports.

A transport sends one message to many device tokens and reports one
PushResult per token, in the order the tokens were given.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin import exceptions as firebase_exceptions

from django_salehooks.conf import settings
from django_salehooks.constants import (
    FCM_MULTICAST_LIMIT,
    INVALID_ARGUMENT,
    INVALID_TOKEN_MESSAGE,
    PERMANENT_TOKEN_ERRORS,
    TOKEN_INVALID,
    TOKEN_NOT_REGISTERED,
)
from django_salehooks.exceptions import PushTransportError

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "django-salehooks"


@dataclass(frozen=True)
class PushResult:
    token: str
    success: bool
    error_code: str | None = None

    @property
    def token_is_dead(self) -> bool:
        return not self.success and self.error_code in PERMANENT_TOKEN_ERRORS


class PushTransport(ABC):
    @abstractmethod
    def send(
        self, tokens: list[str], title: str, body: str, data: dict | None = None
    ) -> list[PushResult]:
        """
        Raises:
            PushTransportError: a batch could not be delivered. Results of
                the batches delivered before it are attached to the error.
        """


def get_push_transport() -> PushTransport:
    return settings.PUSH_TRANSPORT()


def get_firebase_app():
    """Return the app's Firebase instance, initializing it on first use."""
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    cred_setting = settings.FIREBASE_CREDENTIALS
    if cred_setting:
        credential = credentials.Certificate(cred_setting)
    else:
        credential = credentials.ApplicationDefault()

    logger.info("[salehooks] Initializing Firebase app %s", FIREBASE_APP_NAME)
    return firebase_admin.initialize_app(credential, name=FIREBASE_APP_NAME)


def classify_firebase_error(exc: Exception | None) -> str:
    """
    Error code for a failed send. Only codes in PERMANENT_TOKEN_ERRORS
    condemn the token.

    FCM answers INVALID_ARGUMENT both for a malformed token and for a bad
    message (an oversized payload, for one), so the token is only blamed
    when the error says so.
    """
    if isinstance(exc, messaging.UnregisteredError):
        return TOKEN_NOT_REGISTERED
    if isinstance(exc, firebase_exceptions.InvalidArgumentError):
        if INVALID_TOKEN_MESSAGE in str(exc).lower():
            return TOKEN_INVALID
        return INVALID_ARGUMENT
    if isinstance(exc, firebase_exceptions.FirebaseError):
        return str(exc.code).lower().replace("_", "-")
    return "unknown-error"


class FirebasePushTransport(PushTransport):
    """Sends data-only web push messages through Firebase Cloud Messaging."""

    def __init__(self, app=None):
        self._app = app

    @property
    def app(self):
        if self._app is None:
            self._app = get_firebase_app()
        return self._app

    def build_message(
        self, tokens: list[str], title: str, body: str, data: dict | None = None
    ) -> messaging.MulticastMessage:
        link = settings.PUSH_LINK
        payload = {
            "title": title,
            "body": body,
            "link": link,
            "icon": settings.PUSH_ICON,
        }
        payload.update({key: str(value) for key, value in (data or {}).items()})

        # FCM only accepts absolute https links in fcm_options
        fcm_options = None
        if str(link).startswith("https://"):
            fcm_options = messaging.WebpushFCMOptions(link=link)

        return messaging.MulticastMessage(
            tokens=tokens,
            data=payload,
            webpush=messaging.WebpushConfig(
                headers={"Urgency": "high"},
                fcm_options=fcm_options,
            ),
        )

    def send(
        self, tokens: list[str], title: str, body: str, data: dict | None = None
    ) -> list[PushResult]:
        results = []
        for start in range(0, len(tokens), FCM_MULTICAST_LIMIT):
            chunk = tokens[start : start + FCM_MULTICAST_LIMIT]
            message = self.build_message(chunk, title, body, data)
            try:
                response = messaging.send_each_for_multicast(message, app=self.app)
            except (firebase_exceptions.FirebaseError, ValueError) as e:
                raise PushTransportError(
                    f"FCM multicast failed: {e}", results=results
                ) from e

            logger.info(
                "[salehooks] Push sent: %d success, %d failed",
                response.success_count,
                response.failure_count,
            )
            for token, send_response in zip(chunk, response.responses):
                if send_response.success:
                    results.append(PushResult(token=token, success=True))
                else:
                    results.append(
                        PushResult(
                            token=token,
                            success=False,
                            error_code=classify_firebase_error(
                                send_response.exception
                            ),
                        )
                    )
        return results
