"""Public service catalog schema."""

import uuid

from pydantic import BaseModel, ConfigDict


class ServiceResponse(BaseModel):
    """Catalog entry as shown on the services page.

    Attributes:
        id: Service UUID.
        title: Service name.
        description: Marketing copy.
        icon: Frontend icon identifier.
        features: Included features (never null).
        price_range: Display price ("" when unset).
    """

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    title: str
    description: str
    icon: str
    features: list[str]
    price_range: str
