"""Record types used by schema and CLI tests."""

from dataclasses import dataclass


@dataclass
class Users:
    id: int
    name: str
    age: int


@dataclass
class Product:
    sku: str
    price: float
    in_stock: bool
