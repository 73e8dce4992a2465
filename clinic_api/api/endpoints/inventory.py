"""Pharmacy inventory endpoints."""

from fastapi import APIRouter, status

from clinic_api.dependencies import DatabaseSession
from clinic_api.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    StockAdjustment,
)
from clinic_api.services.inventory_service import InventoryService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(data: InventoryItemCreate, db: DatabaseSession):
    """Add a medicine to the inventory."""
    return await InventoryService.create_item(db, data)


@router.get("", response_model=list[InventoryItemResponse])
async def list_items(db: DatabaseSession):
    """List inventory items, newest first."""
    return await InventoryService.list_items(db)


@router.put("/{item_id}", response_model=InventoryItemResponse)
async def update_item(item_id: int, data: InventoryItemUpdate, db: DatabaseSession):
    """Update names, category or stock of an item."""
    return await InventoryService.update_item(db, item_id, data)


@router.patch("/{item_id}/stock", response_model=InventoryItemResponse)
async def adjust_stock(item_id: int, data: StockAdjustment, db: DatabaseSession):
    """Set stock or move it by a delta; never below zero."""
    return await InventoryService.adjust_stock(db, item_id, stock=data.stock, delta=data.delta)
