"""
Material issuance - stock handed out to a site
"""
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import select, func

from backend.models.issuance import MaterialIssuance
from backend.models.material import Material
from backend.models.notification import NotificationKind
from backend.schemas.issuance import IssuanceCreate
from backend.services.actors import Actor, STOCK_KEEPERS
from backend.services.base import BaseService
from backend.services.errors import NotFoundError, ValidationError
from backend.services.inventory_ledger import InventoryLedger
from backend.utils.helpers import format_quantity, normalize_name
from backend.utils.validators import validate_name, validate_positive_quantity


class IssuanceService(BaseService):

    def __init__(self, db, notifier=None, ledger: Optional[InventoryLedger] = None):
        super().__init__(db, notifier)
        self.ledger = ledger if ledger is not None else InventoryLedger(db, self.notifier)

    async def _issue(self, data: IssuanceCreate, actor: Actor) -> MaterialIssuance:
        """Debit the ledger and record the issuance; caller owns the transaction"""
        quantity = validate_positive_quantity(data.quantity)
        site = validate_name(data.issued_to_site, "issued_to_site")
        material = await self.db.get(Material, data.material_id)
        if not material:
            raise NotFoundError("Material", data.material_id)
        unit = validate_name(data.unit if data.unit is not None else material.unit, "unit")

        await self.ledger.decrement(material.id, quantity)

        issuance = MaterialIssuance(
            material_id=material.id,
            material=material,
            quantity=quantity,
            unit=unit,
            issued_to_site=site,
            issued_by=actor.name,
            issued_on=date.today(),
            notes=data.notes,
        )
        self.db.add(issuance)
        self._notify(NotificationKind.SUCCESS, f"{format_quantity(quantity)} {unit} of {material.name} issued to {site}.")
        return issuance

    async def issue_material(self, data: IssuanceCreate, actor: Actor) -> MaterialIssuance:
        async with self._transaction("issue material"):
            self._require_role(actor, STOCK_KEEPERS, "issue material")
            issuance = await self._issue(data, actor)
            await self.db.flush()
        self.logger.info(
            f"{issuance.reference}: {format_quantity(issuance.quantity)} {issuance.unit} of material "
            f"{issuance.material_id} issued to {issuance.issued_to_site} by {actor.name}"
        )
        return issuance

    async def issue_materials(self, items: Sequence[IssuanceCreate], actor: Actor) -> List[MaterialIssuance]:
        """Issue several lines at once; one short line cancels the whole batch"""
        async with self._transaction("issue materials"):
            self._require_role(actor, STOCK_KEEPERS, "issue material")
            if not items:
                raise ValidationError("Nothing to issue")
            issuances = [await self._issue(item, actor) for item in items]
            await self.db.flush()
        self.logger.info(f"{len(issuances)} issuance(s) recorded by {actor.name}")
        return issuances

    async def list_issuances(
        self,
        material_id: Optional[int] = None,
        site: Optional[str] = None,
    ) -> List[MaterialIssuance]:
        query = select(MaterialIssuance).order_by(MaterialIssuance.id.desc())
        if material_id:
            query = query.where(MaterialIssuance.material_id == material_id)
        if site:
            query = query.where(func.lower(MaterialIssuance.issued_to_site) == normalize_name(site))
        result = await self.db.execute(query)
        return list(result.scalars().all())
