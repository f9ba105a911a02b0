"""
Main FastAPI application module.

Creates the app and registers the diner, dashboard, menu and change
subscription routers.
"""
import logging

from fastapi import FastAPI

from tableside.dependencies import lifespan

from .menu_api import router as menu_router
from .order_api import router as order_router
from .dashboard_api import router as dashboard_router
from .changes_api import router as changes_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Tableside", lifespan=lifespan)

app.include_router(menu_router)
app.include_router(order_router)
app.include_router(dashboard_router)
app.include_router(changes_router)

@app.get("/")
async def root():
    """Health check"""
    return {"message": "Tableside API", "status": "running"}
