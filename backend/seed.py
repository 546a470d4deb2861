"""
Demo master data for a fresh database
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.models import InventoryItem, Material, Site, Vendor
from backend.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

DEMO_MATERIALS = [
    # name, unit, opening quantity
    ("Plywood 18mm", "Sheets", 40),
    ("MDF Board 12mm", "Sheets", 25),
    ("Laminate Sheet 1mm", "Sheets", 60),
    ("Soft-close Hinges", "Nos.", 200),
    ("Drawer Channels 18in", "Pairs", 8),
    ("Wood Screws 1in", "Box", 30),
    ("Fevicol SH", "Kg", 5),
    ("Edge Banding Tape", "Rolls", 12),
]

DEMO_VENDORS = ["Greenply Distributors", "Hettich Hardware Mart", "Pidilite Supplies"]

DEMO_SITES = ["Whitefield Villa", "Koramangala Office", "Factory Workshop"]


async def seed_demo_data(session: AsyncSession) -> bool:
    """Insert demo vendors, sites and stocked materials; no-op once any material exists"""
    result = await session.execute(select(Material).limit(1))
    if result.scalars().first():
        return False

    for name in DEMO_VENDORS:
        session.add(Vendor(name=name))
    for name in DEMO_SITES:
        session.add(Site(name=name))
    for name, unit, quantity in DEMO_MATERIALS:
        material = Material(name=name, unit=unit)
        session.add(material)
        await session.flush()
        session.add(InventoryItem(
            material_id=material.id,
            quantity=quantity,
            threshold=settings.DEFAULT_THRESHOLD,
            unit=unit,
        ))

    await session.commit()
    logger.info(
        f"Seeded {len(DEMO_MATERIALS)} materials, {len(DEMO_VENDORS)} vendors and {len(DEMO_SITES)} sites"
    )
    return True
