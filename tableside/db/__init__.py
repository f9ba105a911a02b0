import logging

import alembic.command
import alembic.config
from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from ..settings import Settings

# SQLModel tables must be imported so both alembic and create_all see them
from .menu import Restaurant, Category, Meal, Drink, Special
from .orders import Order, OrderItem

logger = logging.getLogger(__name__)


def run_migrations(settings: Settings):
    alembic_cfg = alembic.config.Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", settings.db_url)
    alembic.command.upgrade(alembic_cfg, "head")


def create_db_engine(settings: Settings) -> Engine:
    if settings.db_url.startswith("sqlite"):
        # One shared connection for in-memory databases, usable from the threadpool
        kwargs = {"connect_args": {"check_same_thread": False}}
        if settings.db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(settings.db_url, **kwargs)
    return create_engine(settings.db_url)


def init_db(settings: Settings, engine: Engine):
    if settings.run_migrations:
        logger.info("Running alembic migrations")
        run_migrations(settings)
    else:
        logger.info("Creating tables from SQLModel metadata")
        SQLModel.metadata.create_all(engine)
