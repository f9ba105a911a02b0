import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import FastAPI, Depends, Request
from sqlalchemy.engine.base import Engine
from sqlmodel import Session

from tableside.db import init_db, create_db_engine
from tableside.services.changes import ChangeBroker
from tableside.settings import Settings

logger = logging.getLogger(__name__)

settings = Settings()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request):
    return request.app.state.engine


def get_changes(request: Request) -> ChangeBroker:
    return request.app.state.changes


def get_session(engine: Engine = Depends(get_engine)):
    with Session(engine) as session:
        yield session

SessionDep = Annotated[Session, Depends(get_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
ChangesDep = Annotated[ChangeBroker, Depends(get_changes)]

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings

    engine = create_db_engine(settings)
    init_db(settings, engine)
    app.state.engine = engine
    app.state.changes = ChangeBroker()
    logger.info("Tableside service started")

    yield # Wait until the app shuts down

    engine.dispose()
    logger.info("Tableside service stopped")
