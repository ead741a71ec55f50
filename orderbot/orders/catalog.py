from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Optional, List, Dict
import yaml
from orderbot.utils.logger import get_logger

logger = get_logger(__name__)

_BUNDLED = os.path.join(os.path.dirname(__file__), "products.yaml")


@dataclass
class Product:
    id:      str
    name:    str
    price:   float
    stock:   Optional[int] = None          # None → unlimited
    aliases: List[str]     = field(default_factory=list)

    def in_stock(self, quantity: int) -> bool:
        return self.stock is None or self.stock >= quantity


def _load(raw: dict) -> Product:
    stock = raw.get("stock")
    return Product(
        id=str(raw["id"]),
        name=raw["name"],
        price=float(raw.get("price", 0)),
        stock=int(stock) if stock is not None else None,
        aliases=[a.lower().strip() for a in raw.get("aliases", []) or []],
    )


def _keys(name: str) -> List[str]:
    n = " ".join(name.lower().split())
    keys = [n]
    # naive singular: "pizzas" → "pizza"; irregular plurals go in aliases
    if n.endswith("s"):
        keys.append(n[:-1])
    return keys


class ProductCatalog:
    def __init__(self, products: Optional[List[Product]] = None):
        self._products: Dict[str, Product] = {}
        self._index:    Dict[str, str]     = {}
        for p in products or []:
            self.add(p)

    @classmethod
    def from_yaml(cls, path: str = "") -> "ProductCatalog":
        path = path or _BUNDLED
        catalog = cls()
        if not os.path.isfile(path):
            logger.warning(f"Products file not found: {path}")
            return catalog
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        for entry in raw.get("products", []) or []:
            try:
                catalog.add(_load(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Skipping bad product entry {entry!r}: {e}")
        logger.info(f"Catalog: {len(catalog)} products loaded from {path}")
        return catalog

    def add(self, product: Product):
        self._products[product.id] = product
        for key in [product.name.lower().strip(), *product.aliases]:
            self._index[key] = product.id

    def find(self, name: str) -> Optional[Product]:
        for key in _keys(name):
            pid = self._index.get(key)
            if pid:
                return self._products[pid]
        return None

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def all(self) -> List[Product]:
        return list(self._products.values())

    def __len__(self) -> int:
        return len(self._products)
