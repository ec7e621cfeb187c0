import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

from django_salehooks.conf import settings
from django_salehooks.exceptions import TenantResolutionError
from django_salehooks.models import Organization

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    organization_id: str
    name: str = ""
    currency: str = "BRL"
    locale: str = "pt_BR"


class TenantResolver(ABC):
    """
    Maps identifying material from a webhook request to a tenant.

    Implementations return None when nothing matches.
    """

    @abstractmethod
    def resolve_secret(self, secret: str) -> TenantContext | None:
        """Tenant owning a webhook secret."""

    @abstractmethod
    def resolve_id(self, identifier: str) -> TenantContext | None:
        """Tenant with the given organization id."""

    def require_id(self, identifier: str) -> TenantContext:
        """Like resolve_id, but raises TenantResolutionError when nothing matches."""
        tenant = self.resolve_id(identifier)
        if tenant is None:
            raise TenantResolutionError(
                f"Organization not found or inactive: {identifier}"
            )
        return tenant


class OrganizationResolver(TenantResolver):
    """Resolver backed by the Organization model."""

    def resolve_secret(self, secret: str) -> TenantContext | None:
        if not secret:
            return None
        organization = Organization.objects.filter(
            webhook_secret=secret, is_active=True
        ).first()
        return self.to_context(organization) if organization else None

    def resolve_id(self, identifier: str) -> TenantContext | None:
        try:
            pk = uuid.UUID(str(identifier))
        except ValueError:
            logger.debug("[salehooks] Invalid organization id %r", identifier)
            return None
        organization = Organization.objects.filter(pk=pk, is_active=True).first()
        return self.to_context(organization) if organization else None

    @staticmethod
    def to_context(organization: Organization) -> TenantContext:
        return TenantContext(
            organization_id=str(organization.pk),
            name=organization.name,
            currency=organization.currency or settings.DEFAULT_CURRENCY,
            locale=organization.locale or settings.DEFAULT_LOCALE,
        )


def get_tenant_resolver() -> TenantResolver:
    return settings.TENANT_RESOLVER()
