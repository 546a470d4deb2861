"""
Inventory ledger tests: atomic increments/decrements, low-stock rules,
opening stock and stock uploads.
"""
import math
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from backend.models import Material
from backend.schemas.inventory import BulkStockRecord, InventoryItemUpdate, OpeningStockNewItem, OpeningStockUpdate
from backend.services.errors import InsufficientStock, NotFoundError, PermissionDenied, ValidationError
from backend.services.master_data import find_by_name


# ===================== PRIMITIVES =====================


async def test_increment_existing_item(ledger, seed_data):
    await ledger.increment(seed_data["plywood"], 15)
    item = await ledger.get_item(seed_data["plywood"])
    assert item.quantity == 55


async def test_increment_creates_record_with_default_threshold(ledger, seed_data):
    await ledger.increment(seed_data["screws"], 12)
    item = await ledger.get_item(seed_data["screws"])
    assert item.quantity == 12
    assert item.threshold == 10
    assert item.unit == "Box"


async def test_increment_rejects_non_positive_quantity(ledger, seed_data):
    with pytest.raises(ValidationError):
        await ledger.increment(seed_data["plywood"], 0)


async def test_fractional_increments_are_exact(ledger, seed_data):
    await ledger.increment(seed_data["screws"], 0.1)
    await ledger.increment(seed_data["screws"], 0.2)
    assert await ledger.quantity_of(seed_data["screws"]) == Decimal("0.3")


@pytest.mark.parametrize("quantity", [math.inf, float("nan"), -0.5, 1e300])
async def test_stock_changes_reject_unusable_quantities(ledger, seed_data, quantity):
    with pytest.raises(ValidationError):
        await ledger.increment(seed_data["plywood"], quantity)
    with pytest.raises(ValidationError):
        await ledger.decrement(seed_data["plywood"], quantity)
    assert await ledger.quantity_of(seed_data["plywood"]) == 40


def test_stock_schemas_reject_non_finite_numbers():
    with pytest.raises(SchemaValidationError):
        OpeningStockUpdate(material_id=1, quantity=math.inf)
    with pytest.raises(SchemaValidationError):
        BulkStockRecord(name="Veneer", unit="Sheets", quantity=1, threshold=float("nan"))


async def test_increment_unknown_material(ledger, seed_data):
    with pytest.raises(NotFoundError):
        await ledger.increment(9999, 5)


async def test_decrement_reduces_stock(ledger, seed_data):
    await ledger.decrement(seed_data["plywood"], 15)
    assert await ledger.quantity_of(seed_data["plywood"]) == 25


async def test_decrement_to_exactly_zero(ledger, seed_data):
    await ledger.decrement(seed_data["plywood"], 40)
    assert await ledger.quantity_of(seed_data["plywood"]) == 0


async def test_decrement_never_goes_negative(ledger, seed_data):
    with pytest.raises(InsufficientStock) as exc_info:
        await ledger.decrement(seed_data["plywood"], 41)
    assert exc_info.value.available == 40
    assert exc_info.value.requested == 41
    assert await ledger.quantity_of(seed_data["plywood"]) == 40


async def test_decrement_without_record(ledger, seed_data):
    with pytest.raises(InsufficientStock) as exc_info:
        await ledger.decrement(seed_data["screws"], 1)
    assert exc_info.value.available == 0


# ===================== LOW STOCK =====================


async def test_low_stock_boundary(ledger, seed_data, db_session):
    item = await ledger.get_item(seed_data["plywood"])
    item.quantity = 10
    assert ledger.is_low_stock(item)
    item.quantity = 11
    assert not ledger.is_low_stock(item)
    await db_session.rollback()


async def test_low_stock_items(ledger, seed_data):
    items = await ledger.low_stock_items()
    assert [item.material_id for item in items] == [seed_data["hinges"]]
    assert items[0].material_name == "Soft-close Hinges"


async def test_suggested_reorder_quantity(ledger, seed_data):
    item = await ledger.get_item(seed_data["hinges"])
    assert ledger.suggested_reorder_quantity(item) == 20


async def test_list_items_sorted_by_material_name(ledger, seed_data):
    items = await ledger.list_items()
    assert [item.material_name for item in items] == ["Plywood 18mm", "Soft-close Hinges"]


# ===================== OPENING STOCK =====================


async def test_set_opening_stock(ledger, seed_data, storekeeper, db_session):
    items = await ledger.set_opening_stock(
        updates=[
            OpeningStockUpdate(material_id=seed_data["plywood"], quantity=100, unit="Boards"),
            OpeningStockUpdate(material_id=seed_data["screws"], quantity=7),
        ],
        new_items=[OpeningStockNewItem(name="Laminate Sheet 1mm", unit="Sheets", quantity=30)],
        actor=storekeeper,
    )
    assert len(items) == 3

    plywood = await ledger.get_item(seed_data["plywood"])
    assert plywood.quantity == 100
    assert plywood.unit == "Boards"
    assert (await db_session.get(Material, seed_data["plywood"])).unit == "Boards"

    screws = await ledger.get_item(seed_data["screws"])
    assert screws.quantity == 7
    assert screws.threshold == 10

    laminate = await find_by_name(db_session, Material, "laminate sheet 1mm")
    assert laminate is not None
    assert (await ledger.get_item(laminate.id)).quantity == 30


async def test_set_opening_stock_is_all_or_nothing(ledger, seed_data, storekeeper):
    with pytest.raises(ValidationError):
        await ledger.set_opening_stock(
            updates=[
                OpeningStockUpdate(material_id=seed_data["plywood"], quantity=100),
                OpeningStockUpdate(material_id=seed_data["hinges"], quantity=-1),
            ],
            new_items=[],
            actor=storekeeper,
        )
    assert await ledger.quantity_of(seed_data["plywood"]) == 40
    assert await ledger.quantity_of(seed_data["hinges"]) == 5


async def test_set_opening_stock_rejects_existing_name_as_new_item(ledger, seed_data, manager):
    with pytest.raises(ValidationError):
        await ledger.set_opening_stock(
            updates=[],
            new_items=[OpeningStockNewItem(name="PLYWOOD 18MM", unit="Sheets", quantity=3)],
            actor=manager,
        )


async def test_set_opening_stock_requires_stock_keeper(ledger, seed_data, purchaser):
    with pytest.raises(PermissionDenied):
        await ledger.set_opening_stock(
            updates=[OpeningStockUpdate(material_id=seed_data["plywood"], quantity=1)],
            new_items=[],
            actor=purchaser,
        )
    assert await ledger.quantity_of(seed_data["plywood"]) == 40


# ===================== BULK UPLOAD =====================


async def test_add_bulk_stock(ledger, seed_data, manager, db_session):
    await ledger.add_bulk_stock(
        [
            BulkStockRecord(name="plywood 18mm", unit="Sheets", quantity=12, threshold=4),
            BulkStockRecord(name="Edge Banding Tape", unit="Rolls", quantity=9, threshold=2),
            BulkStockRecord(name="EDGE BANDING TAPE", unit="Rolls", quantity=11, threshold=2),
        ],
        manager,
    )

    plywood = await ledger.get_item(seed_data["plywood"])
    assert plywood.quantity == 12
    assert plywood.threshold == 4

    tape = await find_by_name(db_session, Material, "Edge Banding Tape")
    tape_item = await ledger.get_item(tape.id)
    # Second row for the same name overwrites the first
    assert tape_item.quantity == 11
    assert tape_item.threshold == 2


async def test_add_bulk_stock_rejects_negative_rows(ledger, seed_data, manager, db_session):
    with pytest.raises(ValidationError):
        await ledger.add_bulk_stock(
            [
                BulkStockRecord(name="Veneer Sheet", unit="Sheets", quantity=5),
                BulkStockRecord(name="Plywood 18mm", unit="Sheets", quantity=-2),
            ],
            manager,
        )
    assert await find_by_name(db_session, Material, "Veneer Sheet") is None
    assert await ledger.quantity_of(seed_data["plywood"]) == 40


# ===================== ITEM EDITS =====================


async def test_update_item_threshold_and_unit(ledger, seed_data, manager, db_session):
    item = await ledger.update_item(
        seed_data["hinges"], InventoryItemUpdate(threshold=3, unit="Pcs"), manager
    )
    assert item.threshold == 3
    assert item.unit == "Pcs"
    assert not item.is_low_stock
    assert (await db_session.get(Material, seed_data["hinges"])).unit == "Pcs"


async def test_update_item_negative_threshold(ledger, seed_data, manager):
    with pytest.raises(ValidationError):
        await ledger.update_item(seed_data["hinges"], InventoryItemUpdate(threshold=-1), manager)


async def test_update_missing_item(ledger, seed_data, manager):
    with pytest.raises(NotFoundError):
        await ledger.update_item(seed_data["screws"], InventoryItemUpdate(threshold=5), manager)
