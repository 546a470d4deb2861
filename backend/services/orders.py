"""
Purchase order lifecycle: create, edit, approve, reject, deliver, cancel.

Every status change is a conditional UPDATE on the status read at the start
of the operation, so a concurrent transition makes the loser fail with
InvalidStateTransition instead of applying twice.
"""
from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import select, update

from backend.config import get_settings
from backend.models.material import Material
from backend.models.notification import NotificationKind
from backend.models.purchase_intent import IntentStatus, PurchaseIntent
from backend.models.purchase_order import (
    OrderLineItem,
    OrderStatus,
    PurchaseOrder,
    TERMINAL_ORDER_STATUSES,
)
from backend.models.vendor import Vendor
from backend.schemas.orders import OrderCreate, OrderDraft, OrderLineInput, OrderUpdate
from backend.services.actors import Actor, ORDER_RAISERS, ORDER_RECEIVERS, Role
from backend.services.base import BaseService
from backend.services.errors import InvalidStateTransition, NotFoundError, PermissionDenied, ValidationError
from backend.services.inventory_ledger import InventoryLedger
from backend.utils.helpers import MONEY_SCALE, reference_code
from backend.utils.validators import (
    validate_name,
    validate_non_negative,
    validate_positive_quantity,
    validate_reason,
)

settings = get_settings()

MANAGERS = frozenset({Role.MANAGER})

# Statuses each role may edit an order in
EDITABLE_BY_MANAGER = frozenset({OrderStatus.PENDING})
EDITABLE_BY_PURCHASER = frozenset({OrderStatus.PENDING, OrderStatus.AWAITING_APPROVAL, OrderStatus.CANCELLED})


class OrderService(BaseService):

    def __init__(self, db, notifier=None, ledger: Optional[InventoryLedger] = None):
        super().__init__(db, notifier)
        self.ledger = ledger if ledger is not None else InventoryLedger(db, self.notifier)

    # ---- helpers -------------------------------------------------------

    async def _get_vendor(self, vendor_id: int) -> Vendor:
        vendor = await self.db.get(Vendor, vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", vendor_id)
        return vendor

    async def _build_line_items(self, line_inputs: Sequence[OrderLineInput]) -> List[OrderLineItem]:
        if not line_inputs:
            raise ValidationError("An order needs at least one line item")

        line_items = []
        for position, line in enumerate(line_inputs, start=1):
            label = f"Line {position}"
            if line.material_id is None:
                raise ValidationError(f"{label}: material is required")
            quantity = validate_positive_quantity(line.quantity, f"{label} quantity")
            if line.rate is None:
                raise ValidationError(f"{label}: rate is required")
            rate = validate_non_negative(line.rate, f"{label} rate", MONEY_SCALE)
            unit = validate_name(line.unit, f"{label} unit")
            discount = validate_non_negative(line.discount, f"{label} discount", MONEY_SCALE) if line.discount is not None else None
            if discount is not None and discount > 100:
                raise ValidationError(f"{label} discount cannot exceed 100%")
            gst = validate_non_negative(line.gst, f"{label} GST", MONEY_SCALE) if line.gst is not None else settings.DEFAULT_GST
            if gst > 100:
                raise ValidationError(f"{label} GST cannot exceed 100%")
            freight = validate_non_negative(line.freight, f"{label} freight", MONEY_SCALE) if line.freight is not None else None

            material = await self.db.get(Material, line.material_id)
            if not material:
                raise NotFoundError("Material", line.material_id)

            line_items.append(OrderLineItem(
                material_id=material.id,
                material=material,
                quantity=quantity,
                unit=unit,
                specifications=line.specifications or "",
                size=line.size,
                brand=line.brand,
                site=line.site,
                rate=rate,
                discount=discount,
                gst=gst,
                freight=freight,
            ))
        return line_items

    async def _check_intent_link(self, intent_id: int) -> None:
        """An order may only be linked to a converted intent that has no order yet"""
        intent = await self.db.get(PurchaseIntent, intent_id)
        if not intent:
            raise NotFoundError("Purchase intent", intent_id)
        if intent.status != IntentStatus.CONVERTED:
            raise InvalidStateTransition("purchase intent", intent.status, "create an order from")
        linked = await self.db.scalar(select(PurchaseOrder.id).where(PurchaseOrder.intent_id == intent_id))
        if linked is not None:
            raise InvalidStateTransition(
                "purchase intent", intent.status, f"create another order from (already linked to {reference_code('PO', linked)})"
            )

    async def _transition(self, order_id: int, expected: Iterable[OrderStatus], action: str, **values) -> None:
        result = await self.db.execute(
            update(PurchaseOrder)
            .where(PurchaseOrder.id == order_id, PurchaseOrder.status.in_(list(expected)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            current = await self.db.scalar(select(PurchaseOrder.status).where(PurchaseOrder.id == order_id))
            raise InvalidStateTransition("order", current, action)

    @staticmethod
    def _require_owner(order: PurchaseOrder, actor: Actor, action: str) -> None:
        if actor.is_purchaser and order.raised_by != actor.name:
            raise PermissionDenied(f"Purchasers may only {action} orders they raised")

    # ---- lifecycle -----------------------------------------------------

    async def create_order(self, data: OrderCreate, actor: Actor) -> PurchaseOrder:
        async with self._transaction("create order"):
            self._require_role(actor, ORDER_RAISERS, "raise purchase orders")
            vendor = await self._get_vendor(data.vendor_id)
            line_items = await self._build_line_items(data.line_items)
            if data.intent_id is not None:
                await self._check_intent_link(data.intent_id)

            status = OrderStatus.PENDING if actor.is_manager else OrderStatus.AWAITING_APPROVAL
            order = PurchaseOrder(
                vendor_id=vendor.id,
                vendor=vendor,
                notes=data.notes,
                priority=data.priority,
                status=status,
                ordered_on=date.today(),
                expected_delivery=data.expected_delivery,
                raised_by=actor.name,
                auto_generated=data.auto_generated,
                intent_id=data.intent_id,
                line_items=line_items,
            )
            self.db.add(order)
            await self.db.flush()

            if status == OrderStatus.AWAITING_APPROVAL:
                self._notify(NotificationKind.INFO, f"Order {order.reference} submitted for approval.")
            else:
                self._notify(NotificationKind.SUCCESS, f"Order {order.reference} created successfully.")

        self.logger.info(f"Order {order.reference} raised by {actor.name} ({actor.role.value}) as {status.value}")
        return await self.get_order(order.id)

    async def update_order(self, order_id: int, data: OrderUpdate, actor: Actor) -> PurchaseOrder:
        """
        Replace an order's editable fields and its whole line-item set.

        Re-editing a rejected or cancelled order resubmits it for approval.
        """
        async with self._transaction("update order"):
            order = await self.get_order(order_id)
            current = order.status
            if current == OrderStatus.DELIVERED:
                raise InvalidStateTransition("order", current, "edit")

            if actor.is_manager:
                editable = EDITABLE_BY_MANAGER
            elif actor.is_purchaser:
                self._require_owner(order, actor, "edit")
                editable = EDITABLE_BY_PURCHASER
            else:
                raise PermissionDenied(f"Role '{actor.role.value}' may not edit orders")
            if current not in editable:
                raise InvalidStateTransition("order", current, "edit")

            vendor = await self._get_vendor(data.vendor_id)
            line_items = await self._build_line_items(data.line_items)

            values = dict(
                vendor_id=vendor.id,
                priority=data.priority,
                expected_delivery=data.expected_delivery,
                notes=data.notes,
            )
            if current == OrderStatus.CANCELLED:
                values.update(
                    status=OrderStatus.AWAITING_APPROVAL,
                    rejected_by=None,
                    rejected_on=None,
                    rejection_reason=None,
                    cancelled_by=None,
                    cancelled_on=None,
                )
            await self._transition(order_id, [current], "edit", **values)

            order.line_items = line_items
            await self.db.flush()
            self._notify(NotificationKind.SUCCESS, f"Order {order.reference} updated successfully.")

        self.logger.info(f"Order {order.reference} edited by {actor.name}")
        return await self.get_order(order_id)

    async def approve_order(self, order_id: int, actor: Actor) -> PurchaseOrder:
        async with self._transaction("approve order"):
            self._require_role(actor, MANAGERS, "approve orders")
            order = await self.get_order(order_id)
            await self._transition(
                order_id,
                [OrderStatus.AWAITING_APPROVAL],
                "approve",
                status=OrderStatus.PENDING,
                approved_by=actor.name,
                approved_on=date.today(),
            )
            self._notify(NotificationKind.SUCCESS, f"Order {order.reference} approved.")
        self.logger.info(f"Order {order.reference} approved by {actor.name}")
        return await self.get_order(order_id)

    async def reject_order(self, order_id: int, reason: Optional[str], actor: Actor) -> PurchaseOrder:
        async with self._transaction("reject order"):
            self._require_role(actor, MANAGERS, "reject orders")
            reason = validate_reason(reason)
            order = await self.get_order(order_id)
            # Managers may also pull back an order they already approved
            await self._transition(
                order_id,
                [OrderStatus.AWAITING_APPROVAL, OrderStatus.PENDING],
                "reject",
                status=OrderStatus.CANCELLED,
                rejected_by=actor.name,
                rejected_on=date.today(),
                rejection_reason=reason,
            )
            self._notify(NotificationKind.DANGER, f"Order {order.reference} has been rejected.")
        self.logger.info(f"Order {order.reference} rejected by {actor.name}: {reason}")
        return await self.get_order(order_id)

    async def mark_delivered(self, order_id: int, actor: Actor) -> PurchaseOrder:
        """Flip pending to delivered and credit every line to the ledger in one transaction"""
        async with self._transaction("mark order delivered"):
            self._require_role(actor, ORDER_RECEIVERS, "receive deliveries")
            order = await self.get_order(order_id)
            await self._transition(
                order_id,
                [OrderStatus.PENDING],
                "mark delivered",
                status=OrderStatus.DELIVERED,
                delivered_on=date.today(),
                received_by=actor.name,
            )
            for line in order.line_items:
                await self.ledger.increment(line.material_id, line.quantity)
            self._notify(
                NotificationKind.SUCCESS,
                f"Order {order.reference} marked as delivered. Inventory updated.",
            )
        self.logger.info(f"Order {order.reference} received by {actor.name}, {len(order.line_items)} line(s) stocked")
        return await self.get_order(order_id)

    async def cancel_order(self, order_id: int, actor: Actor) -> PurchaseOrder:
        async with self._transaction("cancel order"):
            self._require_role(actor, ORDER_RAISERS, "cancel orders")
            order = await self.get_order(order_id)
            self._require_owner(order, actor, "cancel")
            await self._transition(
                order_id,
                [OrderStatus.PENDING],
                "cancel",
                status=OrderStatus.CANCELLED,
                cancelled_by=actor.name,
                cancelled_on=date.today(),
            )
            self._notify(NotificationKind.WARNING, f"Order {order.reference} has been cancelled.")
        self.logger.info(f"Order {order.reference} cancelled by {actor.name}")
        return await self.get_order(order_id)

    async def draft_for_low_stock(self, material_id: int) -> OrderDraft:
        """Pre-filled order for twice the reorder threshold of a low-stock material"""
        item = await self.ledger.get_item(material_id)
        if not self.ledger.is_low_stock(item):
            raise ValidationError(f'"{item.material_name}" is not below its stock threshold')
        return OrderDraft(
            line_items=[
                OrderLineInput(
                    material_id=material_id,
                    quantity=self.ledger.suggested_reorder_quantity(item),
                    unit=item.unit,
                    rate=0,
                    gst=settings.DEFAULT_GST,
                )
            ],
            notes=f"Auto-generated for low stock of {item.material_name}.",
            auto_generated=True,
        )

    # ---- reads ---------------------------------------------------------

    def _select(self):
        return (
            select(PurchaseOrder)
            .order_by(PurchaseOrder.id.desc())
            .execution_options(populate_existing=True)
        )

    async def get_order(self, order_id: int) -> PurchaseOrder:
        result = await self.db.execute(self._select().where(PurchaseOrder.id == order_id))
        order = result.scalars().first()
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    async def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        vendor_id: Optional[int] = None,
        raised_by: Optional[str] = None,
    ) -> List[PurchaseOrder]:
        query = self._select()
        if status:
            query = query.where(PurchaseOrder.status == status)
        if vendor_id:
            query = query.where(PurchaseOrder.vendor_id == vendor_id)
        if raised_by:
            query = query.where(PurchaseOrder.raised_by == raised_by)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def active_orders(self) -> List[PurchaseOrder]:
        result = await self.db.execute(
            self._select().where(PurchaseOrder.status.not_in(list(TERMINAL_ORDER_STATUSES)))
        )
        return list(result.scalars().all())

    async def order_history(self) -> List[PurchaseOrder]:
        result = await self.db.execute(
            self._select().where(PurchaseOrder.status.in_(list(TERMINAL_ORDER_STATUSES)))
        )
        return list(result.scalars().all())
