"""
Data service: the only code that touches the JSON store.

Every mutation reads the full snapshot, applies one change and writes the
full snapshot back. Functions take the store as their first argument and
return the created or updated record.

Raises:
    RecordNotFound: the referenced id does not exist at mutation time.
    InvalidStatusTransition: the booking lifecycle refused the change.
    pydantic.ValidationError: a field failed record validation.
"""
from datetime import datetime, timezone
from typing import Optional

from rentalhq.data.store import JsonStore
from rentalhq.models.records import (
    AppData, Booking, Customer, Generator, GeneratorUnit, Inquiry, Payment, Review,
)
from rentalhq.services.booking_service import apply_status_change
from rentalhq.services.validation_service import log_event
from rentalhq.utils import new_unit_id, next_id


class RecordNotFound(LookupError):
    pass


def _find(collection, record_id, label):
    for index, record in enumerate(collection):
        if record.id == record_id:
            return index, record
    raise RecordNotFound(f"{label} not found.")


def _build_units(units) -> list:
    built = []
    for unit in units or []:
        if isinstance(unit, GeneratorUnit):
            built.append(unit)
            continue
        unit = dict(unit)
        if not unit.get('id'):
            unit['id'] = new_unit_id()
        built.append(GeneratorUnit.model_validate(unit))
    return built


# --- Reads ---

def get_all_data(store: JsonStore) -> AppData:
    return store.read()


# --- Bookings ---

def add_booking(store: JsonStore, booking_data: dict) -> Booking:
    """Creates a Pending booking and bumps the customer's booking counter."""
    booking_data = dict(booking_data)
    customer_id = booking_data.pop('customer_id')
    with store.mutate() as data:
        _, customer = _find(data.customers, customer_id, "Customer")
        booking = Booking.model_validate(dict(
            booking_data,
            id=next_id('B', data.bookings),
            status='Pending',
        ))
        data.bookings.insert(0, booking)
        customer.total_bookings += 1
    log_event("Booking Created", "SUCCESS", {
        "booking_id": booking.id, "customer_id": customer_id, "source": booking.source,
    })
    return booking


def update_booking_status(store: JsonStore, booking_id: str, status: str) -> Booking:
    _, current = _find(store.read().bookings, booking_id, "Booking")
    if current.status == status:
        return current
    with store.mutate() as data:
        _, booking = _find(data.bookings, booking_id, "Booking")
        old_status = booking.status
        changed = apply_status_change(data, booking, status)
    if changed:
        log_event("Booking Status Changed", "SUCCESS", {
            "booking_id": booking_id, "from": old_status, "to": status,
            "units": [u.id for u in booking.booked_units],
        })
    return booking


# --- Customers ---

def add_customer(store: JsonStore, customer_data: dict) -> Customer:
    with store.mutate() as data:
        customer = Customer.model_validate(dict(
            customer_data,
            id=next_id('C', data.customers),
            total_bookings=0,
        ))
        data.customers.append(customer)
    return customer


def update_customer(store: JsonStore, customer_id: str, customer_data: dict) -> Customer:
    changes = {k: v for k, v in customer_data.items() if k not in ('id', 'total_bookings')}
    with store.mutate() as data:
        index, customer = _find(data.customers, customer_id, "Customer")
        data.customers[index] = Customer.model_validate(dict(customer.model_dump(), **changes))
    return data.customers[index]


# --- Generators ---

def add_generator(store: JsonStore, generator_data: dict) -> Generator:
    generator_data = dict(generator_data)
    generator_data.pop('id', None)
    generator_data['units'] = _build_units(generator_data.get('units'))
    with store.mutate() as data:
        generator = Generator.model_validate(dict(
            {'featured': False, 'description': ''},
            **generator_data,
            id=next_id('M', data.generators),
        ))
        data.generators.append(generator)
    return generator


def update_generator(store: JsonStore, generator_id: str, generator_data: dict) -> Generator:
    changes = {k: v for k, v in generator_data.items() if k != 'id'}
    if 'units' in changes:
        changes['units'] = _build_units(changes['units'])
    with store.mutate() as data:
        index, generator = _find(data.generators, generator_id, "Generator")
        merged = dict(generator.model_dump(), **changes)
        data.generators[index] = Generator.model_validate(merged)
    return data.generators[index]


# --- Payments ---

def add_payment(store: JsonStore, payment_data: dict) -> Payment:
    with store.mutate() as data:
        payment = Payment.model_validate(dict(
            payment_data,
            id=next_id('P', data.payments),
            transaction_date=datetime.now(timezone.utc),
        ))
        data.payments.insert(0, payment)
    return payment


def update_payment_status(store: JsonStore, payment_id: str, status: str) -> Payment:
    with store.mutate() as data:
        _, payment = _find(data.payments, payment_id, "Payment")
        payment.status = status
    return payment


# --- Reviews ---

def add_review(store: JsonStore, review_data: dict) -> Review:
    with store.mutate() as data:
        review = Review.model_validate(dict(
            review_data,
            id=next_id('R', data.reviews),
            date=datetime.now(timezone.utc),
        ))
        data.reviews.insert(0, review)
    return review


# --- Inquiries ---

def add_inquiry(store: JsonStore, inquiry_data: dict) -> Inquiry:
    with store.mutate() as data:
        inquiry = Inquiry.model_validate(dict(
            inquiry_data,
            id=next_id('I', data.inquiries),
            date=datetime.now(timezone.utc),
            status='New',
        ))
        data.inquiries.insert(0, inquiry)
    log_event("Inquiry Created", "SUCCESS", {
        "inquiry_id": inquiry.id, "generator_id": inquiry.generator_id,
    })
    return inquiry


def update_inquiry_status(store: JsonStore, inquiry_id: str, status: str) -> Inquiry:
    with store.mutate() as data:
        _, inquiry = _find(data.inquiries, inquiry_id, "Inquiry")
        inquiry.status = status
    return inquiry


def find_booking(data: AppData, booking_id: str) -> Optional[Booking]:
    return next((b for b in data.bookings if b.id == booking_id), None)
