"""
ORM-backed access to the notification collaborators: templates per
organization and the device tokens held on profiles.
"""
import logging
from dataclasses import dataclass

from django.db import transaction

from django_salehooks.constants import DEFAULT_TEMPLATES
from django_salehooks.models import DeviceProfile, NotificationTemplate
from django_salehooks.tenants import TenantContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Template:
    title: str
    message: str
    enabled: bool


def default_template(event_type: str) -> Template:
    return Template(**DEFAULT_TEMPLATES[event_type])


class TemplateStore:
    def load(self, tenant: TenantContext, event_type: str) -> Template:
        """
        Template for the event type, merged over the built-in default.

        Blank title or message on a stored template keep the default text.
        """
        fallback = default_template(event_type)
        stored = NotificationTemplate.objects.filter(
            organization_id=tenant.organization_id, event_type=event_type
        ).first()
        if stored is None:
            return fallback

        return Template(
            title=stored.title or fallback.title,
            message=stored.message or fallback.message,
            enabled=stored.enabled,
        )


class DeviceTokenStore:
    def list_tokens(self, tenant: TenantContext) -> list[tuple[str, list[str]]]:
        profiles = DeviceProfile.objects.filter(
            organization_id=tenant.organization_id
        ).values_list("pk", "push_tokens")
        return [(str(pk), list(tokens or [])) for pk, tokens in profiles]

    def distinct_tokens(self, tenant: TenantContext) -> list[str]:
        seen = {}
        for _profile_id, tokens in self.list_tokens(tenant):
            for token in tokens:
                if token:
                    seen.setdefault(token, None)
        return list(seen)

    def prune(self, tenant: TenantContext, tokens) -> int:
        """
        Remove tokens from every profile of the tenant holding them.

        Returns:
            Number of profiles updated
        """
        invalid = set(tokens)
        if not invalid:
            return 0

        updated = 0
        with transaction.atomic():
            profiles = DeviceProfile.objects.select_for_update().filter(
                organization_id=tenant.organization_id
            )
            for profile in profiles:
                current = profile.push_tokens or []
                kept = [token for token in current if token not in invalid]
                if len(kept) != len(current):
                    profile.push_tokens = kept
                    profile.save(update_fields=["push_tokens", "updated_at"])
                    updated += 1

        logger.info(
            "[salehooks] Pruned %d token(s) from %d profile(s) of organization %s",
            len(invalid),
            updated,
            tenant.organization_id,
        )
        return updated
