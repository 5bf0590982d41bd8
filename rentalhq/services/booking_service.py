"""
Booking lifecycle and checkout rules.

Unit status follows booking status:

    Pending  -> Approved : every booked unit becomes Rented
    Approved -> Rejected : every booked unit becomes Available
    Pending  -> Rejected : status only

Requesting the status a booking already has is a no-op. Rejected is
terminal. Checkout picks the first N Available units of each model in
stored order and does not change their status; nothing holds those units
until an admin approves the booking.
"""
import math
from datetime import datetime
from typing import Dict, List, Optional

from rentalhq.models.records import AppData, BookedUnit, Booking, Customer, Generator
from rentalhq.services.validation_service import log_event

SECONDS_PER_DAY = 24 * 3600


class InvalidStatusTransition(ValueError):
    pass


class CheckoutError(ValueError):
    pass


class OutOfStock(CheckoutError):
    def __init__(self, generator: Generator, requested: int):
        self.generator = generator
        self.requested = requested
        super().__init__(
            f"Only {generator.available_units} unit(s) of {generator.name} available, {requested} requested."
        )


# --- Lifecycle ---

def apply_status_change(data: AppData, booking: Booking, new_status: str) -> bool:
    """
    Moves ``booking`` to ``new_status`` inside ``data`` and cascades unit status.

    Returns False when nothing changed (same status requested).
    Raises InvalidStatusTransition for Pending targets or moves out of Rejected.
    """
    old_status = booking.status
    if new_status == old_status:
        return False
    if new_status not in ('Approved', 'Rejected'):
        raise InvalidStatusTransition(f"Bookings cannot be moved to {new_status}.")
    if old_status == 'Rejected':
        raise InvalidStatusTransition(f"Booking {booking.id} was rejected and cannot be changed.")

    booking.status = new_status
    if old_status == 'Pending' and new_status == 'Approved':
        _set_unit_status(data, booking, 'Rented')
    elif old_status == 'Approved' and new_status == 'Rejected':
        _set_unit_status(data, booking, 'Available')
    return True


def _set_unit_status(data: AppData, booking: Booking, status: str) -> None:
    booked_ids = {unit.id for unit in booking.booked_units}
    # Units removed from the catalog since booking time are skipped.
    for generator in data.generators:
        for unit in generator.units:
            if unit.id in booked_ids:
                unit.status = status


# --- Pricing ---

def rental_days(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Inclusive day count: the 1st to the 7th is 7 days."""
    if start is None or end is None:
        return 0
    days = math.ceil((end - start).total_seconds() / SECONDS_PER_DAY) + 1
    return max(days, 0)


def calculate_total_cost(lines: List[tuple], start, end) -> float:
    """``lines`` is a list of (generator, quantity) pairs."""
    days = rental_days(start, end)
    if days <= 0:
        return 0
    return sum(generator.price_per_day * quantity * days for generator, quantity in lines)


# --- Unit selection ---

def select_units(generator: Generator, quantity: int) -> List[BookedUnit]:
    """First ``quantity`` Available units in stored order, as booking snapshots."""
    available = [unit for unit in generator.units if unit.status == 'Available']
    return [BookedUnit(id=unit.id, serial_number=unit.serial_number) for unit in available[:quantity]]


def build_booking_request(generators: List[Generator], cart_lines: Dict[str, int], start, end) -> dict:
    """
    Validates a cart against the live catalog and returns the booking payload
    (everything but id, status and customer).
    """
    if not cart_lines:
        raise CheckoutError("Your cart is empty.")
    if start is None or end is None or end < start:
        raise CheckoutError("The rental end date must be on or after the start date.")

    catalog = {g.id: g for g in generators}
    lines = []
    for generator_id, quantity in cart_lines.items():
        generator = catalog.get(generator_id)
        if generator is None:
            raise CheckoutError(f"Generator {generator_id} is no longer in the catalog.")
        if quantity > generator.available_units:
            raise OutOfStock(generator, quantity)
        lines.append((generator, quantity))

    booked_units = []
    for generator, quantity in lines:
        booked_units.extend(select_units(generator, quantity))

    return {
        'generator_id': ', '.join(g.id for g, _ in lines),
        'generator_name': ', '.join(f"{g.name} (x{q})" for g, q in lines),
        'start_date': start,
        'end_date': end,
        'booked_units': booked_units,
        'total_cost': calculate_total_cost(lines, start, end),
    }


# --- Customer resolution and checkout ---

def resolve_customer(context, name: str, phone: str, address: str) -> Customer:
    """Returns the customer with this exact phone, creating an Online one if needed."""
    existing = next((c for c in context.customers if c.phone == phone), None)
    if existing is not None:
        return existing
    return context.add_customer({'name': name, 'phone': phone, 'address': address, 'type': 'Online'})


def checkout(context, cart_lines: Dict[str, int], name: str, phone: str, address: str, start, end) -> Booking:
    """Turns the cart into one Pending online booking. Unit statuses are left untouched."""
    request = build_booking_request(context.generators, cart_lines, start, end)
    customer = resolve_customer(context, name, phone, address)
    booking = context.add_booking(dict(
        request,
        customer_id=customer.id,
        customer_name=customer.name,
        source='Online',
    ))
    log_event("Checkout", "SUCCESS", {
        "booking_id": booking.id,
        "customer_id": customer.id,
        "units": [u.id for u in booking.booked_units],
        "total_cost": booking.total_cost,
    })
    return booking


def create_manual_booking(context, customer_id: str, generator_id: str, quantity: int, start, end) -> Booking:
    customer = next((c for c in context.customers if c.id == customer_id), None)
    if customer is None:
        raise CheckoutError("Please select a valid customer.")
    request = build_booking_request(context.generators, {generator_id: quantity}, start, end)
    # Manual bookings keep the plain model name.
    generator = next(g for g in context.generators if g.id == generator_id)
    request['generator_name'] = generator.name
    return context.add_booking(dict(
        request,
        customer_id=customer.id,
        customer_name=customer.name,
        source='Manual',
    ))
