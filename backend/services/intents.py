"""
Purchase intent lifecycle: raise, review, convert to an order draft
"""
from datetime import date
from typing import List, Optional

from sqlalchemy import select, update

from backend.config import get_settings
from backend.models.material import Material
from backend.models.notification import NotificationKind
from backend.models.purchase_intent import IntentStatus, PurchaseIntent, PurchaseIntentLineItem
from backend.models.purchase_order import PurchaseOrder
from backend.schemas.intents import IntentCreate
from backend.schemas.orders import OrderDraft, OrderLineInput
from backend.services.actors import Actor, INTENT_CONVERTERS, INTENT_RAISERS, INTENT_REVIEWERS
from backend.services.base import BaseService
from backend.services.errors import InvalidStateTransition, NotFoundError, ValidationError
from backend.utils.validators import validate_positive_quantity, validate_reason

settings = get_settings()


class IntentService(BaseService):

    async def _transition(self, intent_id: int, expected: IntentStatus, action: str, **values) -> None:
        result = await self.db.execute(
            update(PurchaseIntent)
            .where(PurchaseIntent.id == intent_id, PurchaseIntent.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            current = await self.db.scalar(select(PurchaseIntent.status).where(PurchaseIntent.id == intent_id))
            raise InvalidStateTransition("purchase intent", current, action)

    async def raise_intent(self, data: IntentCreate, actor: Actor) -> PurchaseIntent:
        async with self._transaction("raise purchase intent"):
            self._require_role(actor, INTENT_RAISERS, "raise purchase intents")
            if not data.line_items:
                raise ValidationError("A purchase intent needs at least one line item")

            line_items = []
            for position, line in enumerate(data.line_items, start=1):
                if line.material_id is None:
                    raise ValidationError(f"Line {position}: material is required")
                quantity = validate_positive_quantity(line.quantity, f"Line {position} quantity")
                material = await self.db.get(Material, line.material_id)
                if not material:
                    raise NotFoundError("Material", line.material_id)
                line_items.append(PurchaseIntentLineItem(
                    material_id=material.id,
                    material=material,
                    quantity=quantity,
                    unit=(line.unit or "").strip() or material.unit,
                    site=line.site,
                    notes=line.notes,
                ))

            intent = PurchaseIntent(
                notes=data.notes,
                requested_by=actor.name,
                requested_on=date.today(),
                status=IntentStatus.PENDING,
                line_items=line_items,
            )
            self.db.add(intent)
            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, f"Purchase Intent {intent.reference} raised successfully.")

        self.logger.info(f"Intent {intent.reference} raised by {actor.name} with {len(line_items)} line(s)")
        return await self.get_intent(intent.id)

    async def approve_intent(self, intent_id: int, actor: Actor) -> PurchaseIntent:
        async with self._transaction("approve purchase intent"):
            self._require_role(actor, INTENT_REVIEWERS, "review purchase intents")
            intent = await self.get_intent(intent_id)
            await self._transition(
                intent_id,
                IntentStatus.PENDING,
                "approve",
                status=IntentStatus.APPROVED,
                reviewed_by=actor.name,
                reviewed_on=date.today(),
            )
            self._notify(NotificationKind.SUCCESS, f"Intent {intent.reference} approved for PO creation.")
        self.logger.info(f"Intent {intent.reference} approved by {actor.name}")
        return await self.get_intent(intent_id)

    async def reject_intent(self, intent_id: int, reason: Optional[str], actor: Actor) -> PurchaseIntent:
        async with self._transaction("reject purchase intent"):
            self._require_role(actor, INTENT_REVIEWERS, "review purchase intents")
            reason = validate_reason(reason)
            intent = await self.get_intent(intent_id)
            await self._transition(
                intent_id,
                IntentStatus.PENDING,
                "reject",
                status=IntentStatus.REJECTED,
                reviewed_by=actor.name,
                reviewed_on=date.today(),
                rejection_reason=reason,
            )
            self._notify(NotificationKind.DANGER, f"Intent {intent.reference} has been rejected.")
        self.logger.info(f"Intent {intent.reference} rejected by {actor.name}: {reason}")
        return await self.get_intent(intent_id)

    async def convert_to_order_draft(self, intent_id: int, actor: Actor) -> OrderDraft:
        """
        Mark an approved intent converted and hand back an unsaved order draft.

        The draft carries no vendor or pricing; submitting it through
        OrderService.create_order with intent_id links the order back here.
        A draft that is never submitted shows up in unfulfilled_conversions().
        """
        async with self._transaction("convert purchase intent"):
            self._require_role(actor, INTENT_CONVERTERS, "convert purchase intents")
            intent = await self.get_intent(intent_id)
            await self._transition(intent_id, IntentStatus.APPROVED, "convert", status=IntentStatus.CONVERTED)
            self._notify(NotificationKind.INFO, f"Creating new PO from Intent {intent.reference}.")

        draft = OrderDraft(
            line_items=[
                OrderLineInput(
                    material_id=line.material_id,
                    quantity=line.quantity,
                    unit=line.unit,
                    site=line.site,
                    specifications=line.notes or "",
                    rate=0,
                    gst=settings.DEFAULT_GST,
                )
                for line in intent.line_items
            ],
            notes=f"Generated from Purchase Intent {intent.reference}. Reason: {intent.notes or ''}",
            intent_id=intent.id,
        )
        self.logger.info(f"Intent {intent.reference} converted by {actor.name}")
        return draft

    # ---- reads ---------------------------------------------------------

    def _select(self):
        return (
            select(PurchaseIntent)
            .order_by(PurchaseIntent.id.desc())
            .execution_options(populate_existing=True)
        )

    async def get_intent(self, intent_id: int) -> PurchaseIntent:
        result = await self.db.execute(self._select().where(PurchaseIntent.id == intent_id))
        intent = result.scalars().first()
        if not intent:
            raise NotFoundError("Purchase intent", intent_id)
        return intent

    async def list_intents(self, status: Optional[IntentStatus] = None) -> List[PurchaseIntent]:
        query = self._select()
        if status:
            query = query.where(PurchaseIntent.status == status)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def awaiting_review(self) -> List[PurchaseIntent]:
        return await self.list_intents(IntentStatus.PENDING)

    async def unfulfilled_conversions(self) -> List[PurchaseIntent]:
        """Converted intents whose draft never became an order"""
        linked = select(PurchaseOrder.intent_id).where(PurchaseOrder.intent_id.is_not(None))
        result = await self.db.execute(
            self._select().where(
                PurchaseIntent.status == IntentStatus.CONVERTED,
                PurchaseIntent.id.not_in(linked),
            )
        )
        return list(result.scalars().all())
