"""
Inventory ledger - authoritative on-hand quantity per material.

Stock only moves through atomic conditional UPDATEs so two concurrent
operations can never both pass a "has enough stock" check.
"""
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import func, select, update, insert
from sqlalchemy.exc import IntegrityError

from backend.config import get_settings
from backend.models.inventory import InventoryItem
from backend.models.material import Material
from backend.models.notification import NotificationKind
from backend.schemas.inventory import BulkStockRecord, InventoryItemUpdate, OpeningStockNewItem, OpeningStockUpdate
from backend.services.actors import Actor, STOCK_KEEPERS
from backend.services.base import BaseService
from backend.services.errors import InsufficientStock, NotFoundError, PersistenceFailure, ValidationError
from backend.services.master_data import find_by_name
from backend.utils.helpers import Number, QUANTITY_SCALE
from backend.utils.validators import validate_name, validate_non_negative, validate_positive_quantity

settings = get_settings()


def _rounded(expression):
    # SQLite keeps Numeric as REAL; stored stock stays on QUANTITY_SCALE places
    return func.round(expression, QUANTITY_SCALE, type_=InventoryItem.quantity.type)


class InventoryLedger(BaseService):

    # ---- primitives (run inside the caller's transaction) --------------

    async def increment(self, material_id: int, quantity: Number) -> None:
        """
        Add stock for a material, creating its record on first receipt.

        Does not commit; the order engine calls this once per delivered line
        inside the delivery transaction.
        """
        quantity = validate_positive_quantity(quantity)
        if await self._add_to_existing(material_id, quantity):
            return

        material = await self.db.get(Material, material_id)
        if not material:
            raise NotFoundError("Material", material_id)

        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    insert(InventoryItem).values(
                        material_id=material_id,
                        quantity=quantity,
                        threshold=settings.DEFAULT_THRESHOLD,
                        unit=material.unit,
                    )
                )
        except IntegrityError:
            # Record created concurrently; apply as a plain increment
            self.logger.debug(f"Inventory record for material {material_id} appeared mid-receipt, retrying update")
            if not await self._add_to_existing(material_id, quantity):
                raise PersistenceFailure(f"Inventory record for material {material_id} could not be credited")

    async def decrement(self, material_id: int, quantity: Number) -> None:
        """Remove stock, refusing to go below zero. Does not commit."""
        quantity = validate_positive_quantity(quantity)
        result = await self.db.execute(
            update(InventoryItem)
            .where(InventoryItem.material_id == material_id, InventoryItem.quantity >= quantity)
            .values(quantity=_rounded(InventoryItem.quantity - quantity))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InsufficientStock(material_id, quantity, await self.quantity_of(material_id))

    async def _add_to_existing(self, material_id: int, quantity: Decimal) -> bool:
        result = await self.db.execute(
            update(InventoryItem)
            .where(InventoryItem.material_id == material_id)
            .values(quantity=_rounded(InventoryItem.quantity + quantity))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def _set_absolute(
        self,
        material: Material,
        quantity: Decimal,
        threshold: Optional[Decimal] = None,
        unit: Optional[str] = None,
    ) -> None:
        """Overwrite a material's stock record (opening stock and uploads)"""
        if unit:
            material.unit = unit
        item = await self._load(material.id)
        if item is None:
            self.db.add(InventoryItem(
                material_id=material.id,
                material=material,
                quantity=quantity,
                threshold=settings.DEFAULT_THRESHOLD if threshold is None else threshold,
                unit=material.unit,
            ))
            return
        item.quantity = quantity
        item.unit = material.unit
        if threshold is not None:
            item.threshold = threshold

    async def _load(self, material_id: int) -> Optional[InventoryItem]:
        result = await self.db.execute(
            select(InventoryItem)
            .where(InventoryItem.material_id == material_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    # ---- stock operations ----------------------------------------------

    async def set_opening_stock(
        self,
        updates: Sequence[OpeningStockUpdate],
        new_items: Sequence[OpeningStockNewItem],
        actor: Actor,
    ) -> List[InventoryItem]:
        """Absolute stock levels for existing materials plus brand-new materials, all or nothing"""
        touched = []
        async with self._transaction("set opening stock"):
            self._require_role(actor, STOCK_KEEPERS, "set opening stock")
            if not updates and not new_items:
                raise ValidationError("No stock entries were provided")

            for entry in updates:
                quantity = validate_non_negative(entry.quantity, "quantity")
                material = await self.db.get(Material, entry.material_id)
                if not material:
                    raise NotFoundError("Material", entry.material_id)
                unit = entry.unit.strip() if entry.unit else None
                await self._set_absolute(material, quantity, unit=unit)
                touched.append(material.id)

            for entry in new_items:
                name = validate_name(entry.name)
                unit = validate_name(entry.unit, "unit")
                quantity = validate_non_negative(entry.quantity, "quantity")
                threshold = None if entry.threshold is None else validate_non_negative(entry.threshold, "threshold")
                if await find_by_name(self.db, Material, name):
                    raise ValidationError(f'Material "{name}" already exists; set its stock as an update instead')
                material = Material(name=name, unit=unit)
                self.db.add(material)
                await self.db.flush()
                await self._set_absolute(material, quantity, threshold=threshold)
                touched.append(material.id)

            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, "Stock levels have been updated.")

        self.logger.info(f"Opening stock set for {len(touched)} material(s) by {actor.name}")
        return [await self.get_item(material_id) for material_id in touched]

    async def add_bulk_stock(self, records: Sequence[BulkStockRecord], actor: Actor) -> List[InventoryItem]:
        """
        Apply an uploaded stock sheet.

        Known names (case-insensitive) get their quantity, threshold and unit
        overwritten; unknown names become new materials.
        """
        touched = []
        created = 0
        async with self._transaction("bulk stock upload"):
            self._require_role(actor, STOCK_KEEPERS, "upload stock")
            for record in records:
                name = validate_name(record.name)
                unit = validate_name(record.unit, "unit")
                quantity = validate_non_negative(record.quantity, "quantity")
                threshold = None if record.threshold is None else validate_non_negative(record.threshold, "threshold")

                material = await find_by_name(self.db, Material, name)
                if material is None:
                    material = Material(name=name, unit=unit)
                    self.db.add(material)
                    await self.db.flush()
                    created += 1
                await self._set_absolute(material, quantity, threshold=threshold, unit=unit)
                # Later rows of the same sheet must see this one
                await self.db.flush()
                if material.id not in touched:
                    touched.append(material.id)

            self._notify(NotificationKind.SUCCESS, f"{len(records)} stock records processed from upload.")

        self.logger.info(
            f"Bulk stock upload by {actor.name}: {len(records)} rows, {created} new material(s)"
        )
        return [await self.get_item(material_id) for material_id in touched]

    async def update_item(self, material_id: int, data: InventoryItemUpdate, actor: Actor) -> InventoryItem:
        async with self._transaction("update inventory item"):
            self._require_role(actor, STOCK_KEEPERS, "edit inventory items")
            item = await self.get_item(material_id)
            if data.threshold is not None:
                item.threshold = validate_non_negative(data.threshold, "threshold")
            if data.unit is not None:
                unit = validate_name(data.unit, "unit")
                item.unit = unit
                item.material.unit = unit
            self._notify(NotificationKind.SUCCESS, f'Inventory for "{item.material_name}" updated.')
        return item

    # ---- reads ---------------------------------------------------------

    async def get_item(self, material_id: int) -> InventoryItem:
        item = await self._load(material_id)
        if item is None:
            raise NotFoundError("Inventory item", material_id)
        return item

    async def quantity_of(self, material_id: int) -> Decimal:
        """On-hand quantity; 0 when the material has never been stocked"""
        quantity = await self.db.scalar(
            select(InventoryItem.quantity).where(InventoryItem.material_id == material_id)
        )
        return quantity if quantity is not None else Decimal(0)

    async def list_items(self) -> List[InventoryItem]:
        result = await self.db.execute(
            select(InventoryItem)
            .join(InventoryItem.material)
            .order_by(Material.name)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().unique().all())

    async def low_stock_items(self) -> List[InventoryItem]:
        result = await self.db.execute(
            select(InventoryItem)
            .join(InventoryItem.material)
            .where(InventoryItem.is_low_stock)
            .order_by(Material.name)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().unique().all())

    @staticmethod
    def is_low_stock(item: InventoryItem) -> bool:
        return item.is_low_stock

    @staticmethod
    def suggested_reorder_quantity(item: InventoryItem) -> Decimal:
        return item.threshold * settings.REORDER_MULTIPLIER
