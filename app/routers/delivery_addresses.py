from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.models.addresses import UserDeliveryAddress
from app.repos.delivery_addresses import UserDeliveryAddressesRepo
from app.schemas.addresses import DeliveryAddressOut, NewDeliveryAddress, UpdateDeliveryAddress
from app.security.dependencies import get_delivery_addresses_repo

router = APIRouter(tags=["delivery_addresses"])


@router.get("/users/{user_id}/delivery-addresses", response_model=list[DeliveryAddressOut])
def list_delivery_addresses(
    user_id: int, repo: UserDeliveryAddressesRepo = Depends(get_delivery_addresses_repo)
) -> list[UserDeliveryAddress]:
    return repo.list_for_user(user_id)


@router.post("/delivery-addresses", response_model=DeliveryAddressOut, status_code=status.HTTP_201_CREATED)
def create_delivery_address(
    payload: NewDeliveryAddress, repo: UserDeliveryAddressesRepo = Depends(get_delivery_addresses_repo)
) -> UserDeliveryAddress:
    return repo.create(payload)


@router.put("/delivery-addresses/{id}", response_model=DeliveryAddressOut)
def update_delivery_address(
    id: int,
    payload: UpdateDeliveryAddress,
    repo: UserDeliveryAddressesRepo = Depends(get_delivery_addresses_repo),
) -> UserDeliveryAddress:
    address = repo.update(id, payload)
    if address is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery address not found")
    return address


@router.delete("/delivery-addresses/{id}", response_model=DeliveryAddressOut)
def delete_delivery_address(
    id: int, repo: UserDeliveryAddressesRepo = Depends(get_delivery_addresses_repo)
) -> UserDeliveryAddress:
    address = repo.delete(id)
    if address is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery address not found")
    return address
