"""Initialize database tables and optional demo data"""
import asyncio
from backend.config import get_settings
from backend.database import AsyncSessionLocal, engine, init_models
from backend.seed import seed_demo_data


async def init():
    await init_models()
    print("Database tables created successfully.")

    if get_settings().SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            if await seed_demo_data(session):
                print("Demo master data seeded.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
