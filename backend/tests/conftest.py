"""
Test fixtures - in-memory SQLite database, engines and HTTP clients per role
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.database import Base, build_engine, get_db
from backend.main import app
from backend.models import InventoryItem, Material, Site, Vendor
from backend.services.actors import Actor, Role
from backend.services.intents import IntentService
from backend.services.inventory_ledger import InventoryLedger
from backend.services.issuance import IssuanceService
from backend.services.master_data import MasterDataService
from backend.services.orders import OrderService


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = build_engine("sqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def seed_master_data(session: AsyncSession) -> dict:
    """
    Baseline master data. Returns ids only: a rolled-back test transaction
    expires ORM instances, ids stay valid.

    plywood: 40 Sheets on hand, threshold 10
    hinges:  5 Nos. on hand, threshold 10 (low stock)
    screws:  never stocked
    """
    plywood = Material(name="Plywood 18mm", unit="Sheets")
    hinges = Material(name="Soft-close Hinges", unit="Nos.")
    screws = Material(name="Wood Screws 1in", unit="Box")
    greenply = Vendor(name="Greenply Distributors")
    hettich = Vendor(name="Hettich Hardware Mart")
    whitefield = Site(name="Whitefield Villa")
    workshop = Site(name="Factory Workshop")

    session.add_all([plywood, hinges, screws, greenply, hettich, whitefield, workshop])
    await session.flush()
    session.add_all([
        InventoryItem(material_id=plywood.id, quantity=40, threshold=10, unit="Sheets"),
        InventoryItem(material_id=hinges.id, quantity=5, threshold=10, unit="Nos."),
    ])
    await session.commit()

    return {
        "plywood": plywood.id,
        "hinges": hinges.id,
        "screws": screws.id,
        "greenply": greenply.id,
        "hettich": hettich.id,
        "whitefield": whitefield.id,
        "workshop": workshop.id,
    }


@pytest_asyncio.fixture()
async def seed_data(db_session):
    return await seed_master_data(db_session)


@pytest_asyncio.fixture()
async def session_pair(tmp_path):
    """
    Two independent sessions on one file-backed database, seeded like
    seed_data. Each session stands for a separate request racing the other.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'procurement.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as first, session_factory() as second:
        ids = await seed_master_data(first)
        yield first, second, ids

    await engine.dispose()


# ---- acting users ------------------------------------------------------

@pytest.fixture()
def manager():
    return Actor(name="Asha Rao", role=Role.MANAGER)


@pytest.fixture()
def purchaser():
    return Actor(name="Pat Menon", role=Role.PURCHASER)


@pytest.fixture()
def other_purchaser():
    return Actor(name="Ravi Kumar", role=Role.PURCHASER)


@pytest.fixture()
def storekeeper():
    return Actor(name="Ivan D'Souza", role=Role.INVENTORY_MANAGER)


# ---- engines -----------------------------------------------------------

@pytest.fixture()
def ledger(db_session):
    return InventoryLedger(db_session)


@pytest.fixture()
def master(db_session):
    return MasterDataService(db_session)


@pytest.fixture()
def order_service(db_session, ledger):
    return OrderService(db_session, ledger=ledger)


@pytest.fixture()
def intent_service(db_session):
    return IntentService(db_session)


@pytest.fixture()
def issuance_service(db_session, ledger):
    return IssuanceService(db_session, ledger=ledger)


# ---- HTTP --------------------------------------------------------------

def role_headers(actor: Actor) -> dict:
    return {"X-User-Name": actor.name, "X-User-Role": actor.role.value}


@pytest.fixture()
def manager_headers(manager):
    return role_headers(manager)


@pytest.fixture()
def purchaser_headers(purchaser):
    return role_headers(purchaser)


@pytest.fixture()
def storekeeper_headers(storekeeper):
    return role_headers(storekeeper)


@pytest_asyncio.fixture()
async def client(db_session, seed_data, manager_headers):
    """httpx AsyncClient bound to the FastAPI app, acting as the manager by default"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers.update(manager_headers)
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauth_client(db_session):
    """httpx AsyncClient without identity headers"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
