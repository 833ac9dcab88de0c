"""In-memory catalog for development and testing."""

from ordering.catalog.port import CatalogService, Meal


class FakeCatalog(CatalogService):
    def __init__(self, meals: list[Meal] | None = None) -> None:
        self.meals: dict[str, Meal] = {}
        self.lookups: list[str] = []
        for meal in meals or []:
            self.add(meal)

    def add(self, meal: Meal) -> Meal:
        self.meals[str(meal.meal_id)] = meal
        return meal

    def seed(self, meal_id, name, price, chef_id, available=True) -> Meal:
        return self.add(Meal(meal_id=str(meal_id), name=name, price=price, chef_id=str(chef_id), available=available))

    def withdraw(self, meal_id) -> None:
        """Drop a meal, as if the chef deleted it."""
        self.meals.pop(str(meal_id), None)

    def get_meal(self, meal_id: str) -> Meal | None:
        self.lookups.append(str(meal_id))
        return self.meals.get(str(meal_id))
