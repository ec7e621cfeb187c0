import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from django_salehooks.constants import STATUS_MAP, AmountUnit
from django_salehooks.normalization import NormalizedSale

logger = logging.getLogger(__name__)


class GatewayPayload(BaseModel):
    """Base for gateway payload schemas. Unknown keys are ignored."""

    model_config = ConfigDict(coerce_numbers_to_str=True)


@dataclass
class ValidationOutcome:
    valid: bool
    data: BaseModel | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    # Set when a tolerant gateway substituted placeholder identifiers
    missing_data: bool = False


class GatewayAdapter(ABC):
    """
    Validates and normalizes the webhook payload of one gateway.

    Subclasses declare the pydantic schema and implement normalize().
    """

    slug: str = ""
    name: str = ""
    schema: type[GatewayPayload]
    tolerant: bool = False
    amount_unit: AmountUnit = AmountUnit.cents
    status_table: dict = STATUS_MAP

    def validate(self, body: Any) -> ValidationOutcome:
        try:
            data = self.schema.model_validate(body)
        except ValidationError as e:
            logger.warning(
                "[salehooks] %s payload failed validation with %d error(s)",
                self.name,
                e.error_count(),
            )
            return ValidationOutcome(
                valid=False, errors=json.loads(e.json(include_url=False))
            )

        missing_data = self.tolerant and self.has_missing_data(data)
        if missing_data:
            logger.warning(
                "[salehooks] %s payload accepted with missing transaction data",
                self.name,
            )
        return ValidationOutcome(valid=True, data=data, missing_data=missing_data)

    def has_missing_data(self, data: GatewayPayload) -> bool:
        return False

    @abstractmethod
    def normalize(self, data: GatewayPayload) -> NormalizedSale:
        raise NotImplementedError

    def build_sale(self, data: GatewayPayload, body: Any) -> NormalizedSale:
        """Normalize validated data, keeping the body exactly as received."""
        sale = self.normalize(data)
        sale.payload = body
        return sale

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.slug}>"
