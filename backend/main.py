from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .database import engine, Base
from .routers import orders, exports, customers, catalog, dashboard

logger = logging.getLogger("stoneorders")

BASE_REVISION = "3f1c9a2b7d10"

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Databases created by Base.metadata.create_all() have the tables but no
    alembic_version table; those are stamped at the base revision first.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)

        # Override sqlalchemy.url from environment if DATABASE_URL is set
        database_url = os.environ.get("DATABASE_URL")
        if database_url:
            alembic_cfg.set_main_option("sqlalchemy.url", database_url)

        tables = inspect(engine).get_table_names()
        if "alembic_version" not in tables and "orders" in tables:
            logger.info("Stamping base migration %s (tables already exist)", BASE_REVISION)
            command.stamp(alembic_cfg, BASE_REVISION)

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning(f"Alembic migration warning: {e}")

app = FastAPI(
    title="Stone Orders",
    description="Order and quote management for a marble and natural stone workshop",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(orders.router, prefix="/api")
app.include_router(exports.router, prefix="/api")
app.include_router(customers.router, prefix="/api")
app.include_router(catalog.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")

@app.get("/health")
def health():
    return {"status": "ok", "app": "stone-orders"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


@app.on_event("startup")
def auto_seed():
    """Auto-seed the stone type catalog on first run."""
    from .database import SessionLocal
    from .routers.catalog import DEFAULT_STONE_TYPES
    from . import models
    db = SessionLocal()
    try:
        if db.query(models.StoneType).count() == 0:
            for name in DEFAULT_STONE_TYPES:
                db.add(models.StoneType(name=name))
            db.commit()
            logger.info("Seeded %d stone types", len(DEFAULT_STONE_TYPES))
    finally:
        db.close()
