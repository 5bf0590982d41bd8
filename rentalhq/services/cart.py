"""
Session cart: generator model -> staged quantity.

Availability is always counted on the current catalog snapshot, never cached
in the cart. The cart is advisory only: it does not reserve units and never
writes unit status.
"""
from typing import Dict, List, Optional

from rentalhq.models.records import Generator
from rentalhq.services.booking_service import calculate_total_cost, rental_days


class Cart:
    def __init__(self, lines: Optional[Dict[str, int]] = None, generators: Optional[List[Generator]] = None):
        self.lines = {str(k): int(v) for k, v in (lines or {}).items() if int(v) > 0}
        self.generators = generators or []

    def _generator(self, generator_id) -> Optional[Generator]:
        return next((g for g in self.generators if g.id == generator_id), None)

    def available_units(self, generator_id) -> int:
        generator = self._generator(generator_id)
        if generator is None:
            return 0
        return generator.available_units

    def quantity(self, generator_id) -> int:
        return self.lines.get(generator_id, 0)

    def can_increase(self, generator_id) -> bool:
        return self.available_units(generator_id) - self.quantity(generator_id) > 0

    def add(self, generator_id) -> bool:
        """Stages one more unit. Returns False (cart untouched) when out of stock."""
        if not self.can_increase(generator_id):
            return False
        self.lines[generator_id] = self.quantity(generator_id) + 1
        return True

    def update_quantity(self, generator_id, quantity) -> bool:
        if quantity <= 0:
            self.remove(generator_id)
            return True
        if quantity > self.available_units(generator_id):
            return False
        self.lines[generator_id] = quantity
        return True

    def remove(self, generator_id) -> None:
        self.lines.pop(generator_id, None)

    def clear(self) -> None:
        self.lines.clear()

    @property
    def count(self) -> int:
        return sum(self.lines.values())

    def items(self):
        """(generator, quantity) pairs for lines whose model still exists."""
        pairs = []
        for generator_id, quantity in self.lines.items():
            generator = self._generator(generator_id)
            if generator is not None:
                pairs.append((generator, quantity))
        return pairs

    def rental_days(self, start, end) -> int:
        return rental_days(start, end)

    def total_cost(self, start, end) -> float:
        return calculate_total_cost(self.items(), start, end)

    def __len__(self):
        return len(self.lines)
