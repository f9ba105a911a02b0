"""Key-value store kept on the diner device, survives restarts."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .schemas.cart import CartSnapshot

logger = logging.getLogger(__name__)

CURRENT_RESTAURANT_KEY = "current_restaurant_id"
DINER_NAME_KEY = "diner_name"
TABLE_NUMBER_KEY = "table_number"
CART_KEY = "cart"


class LocalStore:
    def __init__(self, path):
        self.path = Path(path)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read local store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    def get(self, key: str, default=None):
        return self._data.get(key, default)

    def set(self, key: str, value):
        self._data[key] = value
        self._flush()

    def remove(self, key: str):
        if key in self._data:
            del self._data[key]
            self._flush()

    def load_cart(self) -> Optional[CartSnapshot]:
        raw = self._data.get(CART_KEY)
        if raw is None:
            return None
        try:
            return CartSnapshot.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable stored cart: {e}")
            return None

    def save_cart(self, snapshot: CartSnapshot):
        self.set(CART_KEY, snapshot.model_dump(mode="json"))
