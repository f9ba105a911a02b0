"""
Read-only menu API for diner devices.

Menu and special editing happens elsewhere; these endpoints only expose what
the cart needs to price lines and suggest pairings.
"""
from fastapi import APIRouter, HTTPException

from tableside.db.orders import ItemType
from tableside.dependencies import SessionDep
from tableside.schemas.menu import MenuOut, PairingsOut
from tableside.services.menu import load_menu, suggest_pairings

router = APIRouter()


@router.get("/restaurants/{restaurant_id}/menu", response_model=MenuOut)
def get_menu(restaurant_id: str, session: SessionDep):
    menu = load_menu(session, restaurant_id)
    if menu is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return menu


@router.get("/restaurants/{restaurant_id}/pairings/{item_type}/{item_id}",
            response_model=PairingsOut)
def get_pairings(restaurant_id: str, item_type: ItemType, item_id: str, session: SessionDep):
    """Complementary items to offer after something was added to the cart."""
    return suggest_pairings(session, restaurant_id, item_type, item_id)
