from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DeliveryAddressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    country: str
    postal_code: str
    administrative_area_level_1: str | None
    administrative_area_level_2: str | None
    locality: str | None
    political: str | None
    route: str | None
    street_number: str | None
    address: str | None
    is_priority: bool


class NewDeliveryAddress(BaseModel):
    user_id: int
    country: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    administrative_area_level_1: str | None = None
    administrative_area_level_2: str | None = None
    locality: str | None = None
    political: str | None = None
    route: str | None = None
    street_number: str | None = None
    address: str | None = None
    is_priority: bool = False


class UpdateDeliveryAddress(BaseModel):
    country: str | None = Field(default=None, min_length=1)
    postal_code: str | None = Field(default=None, min_length=1)
    administrative_area_level_1: str | None = None
    administrative_area_level_2: str | None = None
    locality: str | None = None
    political: str | None = None
    route: str | None = None
    street_number: str | None = None
    address: str | None = None
    is_priority: bool | None = None
