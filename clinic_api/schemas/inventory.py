"""Pharmacy inventory schemas.

The mobile client speaks camelCase, so request fields are aliased and
responses are serialized by alias.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from clinic_api.schemas.common import OptionalText, RequiredText


class InventoryItemCreate(BaseModel):
    """Schema for adding a medicine to the inventory."""

    model_config = ConfigDict(populate_by_name=True)

    category: OptionalText = None
    brand_name: OptionalText = Field(None, alias="brandName")
    generic_name: RequiredText = Field(..., alias="genericName")
    dosage_type: OptionalText = Field(None, alias="dosageType")
    strength: OptionalText = None
    unit: OptionalText = None
    expiration_date: OptionalText = Field(None, alias="expirationDate")
    stock: int | None = None
    description: OptionalText = None


class InventoryItemUpdate(BaseModel):
    """Schema for editing an inventory item.

    ``name`` may carry both names as ``"Generic (Brand)"`` and is only used
    when ``genericName`` is absent.
    """

    model_config = ConfigDict(populate_by_name=True)

    generic_name: OptionalText = Field(None, alias="genericName")
    brand_name: OptionalText = Field(None, alias="brandName")
    category: OptionalText = None
    stock: int | None = None
    name: str | None = None


class StockAdjustment(BaseModel):
    """Absolute stock target or signed delta; exactly one is required."""

    stock: StrictInt | None = None
    delta: StrictInt | None = None


class InventoryItemResponse(BaseModel):
    """Schema for inventory item response."""

    id: int
    category: str | None = None
    brand_name: str | None = Field(None, serialization_alias="brandName")
    generic_name: str = Field(..., serialization_alias="genericName")
    dosage_type: str | None = Field(None, serialization_alias="dosageType")
    strength: str | None = None
    unit: str | None = None
    expiration_date: str | None = Field(None, serialization_alias="expirationDate")
    stock: int = 0
    description: str | None = None
    created_at: datetime | None = None
