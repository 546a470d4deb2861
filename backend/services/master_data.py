"""
Master data store: materials, vendors and sites.

Simple reference entities with case-insensitive unique names and deletion
guards that refuse to remove anything an order (or stock history) still
points at.
"""
from typing import List, Optional, Sequence, Type

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.models.inventory import InventoryItem
from backend.models.issuance import MaterialIssuance
from backend.models.material import Material
from backend.models.notification import NotificationKind
from backend.models.purchase_intent import PurchaseIntentLineItem
from backend.models.purchase_order import OrderLineItem, PurchaseOrder
from backend.models.site import Site
from backend.models.vendor import Vendor
from backend.schemas.master_data import BulkMaterialRecord, BulkNameRecord, MaterialCreate, MaterialUpdate
from backend.services.actors import Actor
from backend.services.base import BaseService
from backend.services.errors import NotFoundError, ReferentialIntegrityError, ValidationError
from backend.utils.helpers import normalize_name
from backend.utils.validators import validate_name

settings = get_settings()


async def find_by_name(db: AsyncSession, model: Type, name: str):
    """Case-insensitive lookup of a master record by name"""
    result = await db.execute(
        select(model).where(func.lower(model.name) == normalize_name(name))
    )
    return result.scalars().first()


async def _count(db: AsyncSession, column, *criteria) -> int:
    return await db.scalar(select(func.count(column)).where(*criteria)) or 0


class MasterDataService(BaseService):
    """CRUD for materials, vendors and sites"""

    # ---- shared helpers ------------------------------------------------

    async def _get(self, model: Type, label: str, entity_id: int):
        entity = await self.db.get(model, entity_id)
        if not entity:
            raise NotFoundError(label, entity_id)
        return entity

    async def _ensure_unique(self, model: Type, label: str, name: str, exclude_id: Optional[int] = None) -> None:
        existing = await find_by_name(self.db, model, name)
        if existing and existing.id != exclude_id:
            raise ValidationError(f'{label} "{existing.name}" already exists')

    async def _list(self, model: Type) -> List:
        result = await self.db.execute(select(model).order_by(model.name))
        return list(result.scalars().all())

    async def _add_named(self, model: Type, label: str, name: str, actor: Actor):
        async with self._transaction(f"add {label.lower()}"):
            name = validate_name(name)
            await self._ensure_unique(model, label, name)
            entity = model(name=name)
            self.db.add(entity)
            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, f'{label} "{name}" added.')
        self.logger.info(f"{label} {entity.id} '{name}' added by {actor.name}")
        return entity

    async def _rename(self, model: Type, label: str, entity_id: int, name: str, actor: Actor):
        async with self._transaction(f"update {label.lower()}"):
            entity = await self._get(model, label, entity_id)
            name = validate_name(name)
            await self._ensure_unique(model, label, name, exclude_id=entity_id)
            entity.name = name
            self._notify(NotificationKind.SUCCESS, f'{label} "{name}" updated.')
        self.logger.info(f"{label} {entity_id} renamed to '{name}' by {actor.name}")
        return entity

    async def _bulk_add_named(self, model: Type, label: str, records: Sequence[BulkNameRecord], actor: Actor) -> List:
        created = []
        async with self._transaction(f"bulk add {label.lower()}s"):
            seen = {normalize_name(e.name) for e in await self._list(model)}
            for record in records:
                key = normalize_name(record.name)
                if not key or key in seen:
                    continue
                seen.add(key)
                entity = model(name=record.name.strip())
                self.db.add(entity)
                created.append(entity)
            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, f"{len(created)} new {label.lower()}s added.")
        self.logger.info(f"Bulk import by {actor.name}: {len(created)} of {len(records)} {label.lower()}s created")
        return created

    async def _delete(self, entity, label: str, actor: Actor) -> None:
        name = entity.name
        await self.db.delete(entity)
        self._notify(NotificationKind.DANGER, f'{label} "{name}" deleted.')
        self.logger.info(f"{label} {entity.id} '{name}' deleted by {actor.name}")

    # ---- materials -----------------------------------------------------

    async def list_materials(self) -> List[Material]:
        return await self._list(Material)

    async def get_material(self, material_id: int) -> Material:
        return await self._get(Material, "Material", material_id)

    async def add_material(self, data: MaterialCreate, actor: Actor) -> Material:
        async with self._transaction("add material"):
            name = validate_name(data.name)
            unit = validate_name(data.unit, "unit")
            await self._ensure_unique(Material, "Material", name)
            material = Material(name=name, unit=unit)
            self.db.add(material)
            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, f'Material "{name}" added.')
        self.logger.info(f"Material {material.id} '{name}' ({unit}) added by {actor.name}")
        return material

    async def update_material(self, material_id: int, data: MaterialUpdate, actor: Actor) -> Material:
        async with self._transaction("update material"):
            material = await self.get_material(material_id)
            if data.name is not None:
                name = validate_name(data.name)
                await self._ensure_unique(Material, "Material", name, exclude_id=material_id)
                material.name = name
            if data.unit is not None:
                material.unit = validate_name(data.unit, "unit")
                # Stock record always reports the material's unit
                item = await self.db.get(InventoryItem, material_id)
                if item:
                    item.unit = material.unit
            self._notify(NotificationKind.SUCCESS, f'Material "{material.name}" updated.')
        self.logger.info(f"Material {material_id} updated by {actor.name}")
        return material

    async def delete_material(self, material_id: int, actor: Actor) -> None:
        async with self._transaction("delete material"):
            material = await self.get_material(material_id)
            order_refs = await _count(self.db, OrderLineItem.id, OrderLineItem.material_id == material_id)
            if order_refs:
                raise ReferentialIntegrityError(
                    f'Material "{material.name}" is used in {order_refs} order line item(s) and cannot be deleted'
                )
            intent_refs = await _count(
                self.db, PurchaseIntentLineItem.id, PurchaseIntentLineItem.material_id == material_id
            )
            issuance_refs = await _count(self.db, MaterialIssuance.id, MaterialIssuance.material_id == material_id)
            if intent_refs or issuance_refs:
                raise ReferentialIntegrityError(
                    f'Material "{material.name}" has purchase intent or issuance history and cannot be deleted'
                )
            await self.db.execute(delete(InventoryItem).where(InventoryItem.material_id == material_id))
            await self._delete(material, "Material", actor)

    async def bulk_add_materials(self, records: Sequence[BulkMaterialRecord], actor: Actor) -> List[Material]:
        """Create materials from an import, skipping names that already exist"""
        created = []
        async with self._transaction("bulk add materials"):
            seen = {normalize_name(m.name) for m in await self.list_materials()}
            for record in records:
                key = normalize_name(record.name)
                if not key or key in seen:
                    continue
                seen.add(key)
                unit = (record.unit or "").strip() or settings.DEFAULT_MATERIAL_UNIT
                material = Material(name=record.name.strip(), unit=unit)
                self.db.add(material)
                created.append(material)
            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, f"{len(created)} new materials added.")
        self.logger.info(f"Bulk import by {actor.name}: {len(created)} of {len(records)} materials created")
        return created

    # ---- vendors -------------------------------------------------------

    async def list_vendors(self) -> List[Vendor]:
        return await self._list(Vendor)

    async def get_vendor(self, vendor_id: int) -> Vendor:
        return await self._get(Vendor, "Vendor", vendor_id)

    async def add_vendor(self, name: str, actor: Actor) -> Vendor:
        return await self._add_named(Vendor, "Vendor", name, actor)

    async def update_vendor(self, vendor_id: int, name: str, actor: Actor) -> Vendor:
        return await self._rename(Vendor, "Vendor", vendor_id, name, actor)

    async def delete_vendor(self, vendor_id: int, actor: Actor) -> None:
        async with self._transaction("delete vendor"):
            vendor = await self.get_vendor(vendor_id)
            order_refs = await _count(self.db, PurchaseOrder.id, PurchaseOrder.vendor_id == vendor_id)
            if order_refs:
                raise ReferentialIntegrityError(
                    f'Vendor "{vendor.name}" has {order_refs} purchase order(s) and cannot be deleted'
                )
            await self._delete(vendor, "Vendor", actor)

    async def bulk_add_vendors(self, records: Sequence[BulkNameRecord], actor: Actor) -> List[Vendor]:
        return await self._bulk_add_named(Vendor, "Vendor", records, actor)

    # ---- sites ---------------------------------------------------------

    async def list_sites(self) -> List[Site]:
        return await self._list(Site)

    async def get_site(self, site_id: int) -> Site:
        return await self._get(Site, "Site", site_id)

    async def add_site(self, name: str, actor: Actor) -> Site:
        return await self._add_named(Site, "Site", name, actor)

    async def update_site(self, site_id: int, name: str, actor: Actor) -> Site:
        return await self._rename(Site, "Site", site_id, name, actor)

    async def delete_site(self, site_id: int, actor: Actor) -> None:
        async with self._transaction("delete site"):
            site = await self.get_site(site_id)
            key = normalize_name(site.name)
            order_refs = await _count(self.db, OrderLineItem.id, func.lower(OrderLineItem.site) == key)
            if order_refs:
                raise ReferentialIntegrityError(
                    f'Site "{site.name}" is used in {order_refs} order line item(s) and cannot be deleted'
                )
            issuance_refs = await _count(
                self.db, MaterialIssuance.id, func.lower(MaterialIssuance.issued_to_site) == key
            )
            if issuance_refs:
                raise ReferentialIntegrityError(
                    f'Site "{site.name}" has {issuance_refs} issuance record(s) and cannot be deleted'
                )
            await self._delete(site, "Site", actor)

    async def bulk_add_sites(self, records: Sequence[BulkNameRecord], actor: Actor) -> List[Site]:
        return await self._bulk_add_named(Site, "Site", records, actor)
