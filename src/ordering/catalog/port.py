"""Catalog service port.

The ordering core never trusts client-supplied prices: every cart add and
every checkout resolves the meal here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Meal:
    """A meal as published by a chef, at the moment it was looked up."""

    meal_id: str
    name: str
    price: float
    chef_id: str
    image: str | None = None
    available: bool = True


class CatalogService(ABC):
    @abstractmethod
    def get_meal(self, meal_id: str) -> Meal | None:
        """Return the meal, or None when it does not exist."""
        ...
