"""Pharmacy inventory service."""

import re

import structlog
from sqlalchemy import case, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.exceptions import NotFoundException, ValidationException
from clinic_api.models import inventory
from clinic_api.schemas.inventory import InventoryItemCreate, InventoryItemUpdate
from clinic_api.services.merge import clamp_at_zero, replace_if_supplied

logger = structlog.get_logger()

# "Generic (Brand)" or just "Generic"
COMBINED_NAME = re.compile(r"^\s*(.*?)\s*(?:\((.*?)\))?\s*$")


def split_combined_name(name: str) -> tuple[str | None, str | None]:
    """Split ``"Generic (Brand)"`` into its generic and brand parts."""
    match = COMBINED_NAME.match(name)
    if not match:
        return name.strip() or None, None
    generic = (match.group(1) or "").strip() or None
    brand = (match.group(2) or "").strip() or None
    return generic, brand


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class InventoryService:
    """Service for inventory items and stock levels."""

    @staticmethod
    async def create_item(db: AsyncSession, data: InventoryItemCreate) -> dict:
        """Add a medicine; stock defaults to 0 and is never negative."""
        stmt = (
            insert(inventory)
            .values(
                category=data.category,
                brand_name=data.brand_name,
                generic_name=data.generic_name,
                dosage_type=data.dosage_type,
                strength=data.strength,
                unit=data.unit,
                expiration_date=data.expiration_date,
                stock=clamp_at_zero(data.stock or 0),
                description=data.description,
            )
            .returning(inventory)
        )
        result = await db.execute(stmt)
        item = dict(result.mappings().one())
        await db.commit()

        logger.info("inventory_item_created", item_id=item["id"], stock=item["stock"])
        return item

    @staticmethod
    async def list_items(db: AsyncSession) -> list[dict]:
        """List inventory items, newest first."""
        query = select(inventory).order_by(inventory.c.created_at.desc(), inventory.c.id.desc())
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def update_item(db: AsyncSession, item_id: int, data: InventoryItemUpdate) -> dict:
        """
        Update names, category or stock of an item.

        Raises:
            NotFoundException: If no item has the id
        """
        generic_name, brand_name = data.generic_name, data.brand_name
        if not generic_name and data.name is not None:
            generic_name, brand_name = split_combined_name(data.name)

        c = inventory.c
        stock = clamp_at_zero(data.stock) if data.stock is not None else None
        stmt = (
            update(inventory)
            .where(c.id == item_id)
            .values(
                generic_name=replace_if_supplied(generic_name, c.generic_name),
                brand_name=replace_if_supplied(brand_name, c.brand_name),
                category=replace_if_supplied(data.category, c.category),
                stock=replace_if_supplied(stock, c.stock),
            )
            .returning(inventory)
        )
        result = await db.execute(stmt)
        row = result.mappings().first()
        if not row:
            await db.rollback()
            raise NotFoundException("Inventory item not found")
        item = dict(row)
        await db.commit()
        return item

    @staticmethod
    async def adjust_stock(
        db: AsyncSession,
        item_id: int,
        stock: int | None = None,
        delta: int | None = None,
    ) -> dict:
        """
        Set stock to an absolute value or move it by a signed delta.

        The stored value is ``max(0, stock)`` or ``max(0, current + delta)``,
        computed by the database in a single UPDATE.

        Raises:
            ValidationException: Unless exactly one integer argument is given
            NotFoundException: If no item has the id
        """
        if (stock is None) == (delta is None):
            raise ValidationException("Provide either stock or delta as a number")
        if stock is not None and not _is_int(stock):
            raise ValidationException("stock must be an integer")
        if delta is not None and not _is_int(delta):
            raise ValidationException("delta must be an integer")

        c = inventory.c
        if delta is not None:
            moved = func.coalesce(c.stock, 0) + delta
            new_stock = case((moved < 0, 0), else_=moved)
        else:
            new_stock = clamp_at_zero(stock)

        stmt = (
            update(inventory)
            .where(c.id == item_id)
            .values(stock=new_stock)
            .returning(inventory)
        )
        result = await db.execute(stmt)
        row = result.mappings().first()
        if not row:
            await db.rollback()
            raise NotFoundException("Inventory item not found")
        item = dict(row)
        await db.commit()

        logger.info("inventory_stock_adjusted", item_id=item_id, stock=item["stock"])
        return item
