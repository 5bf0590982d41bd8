from datetime import datetime

import pytest

from rentalhq.data import service
from rentalhq.data.service import RecordNotFound


def booking_payload(**extra):
    payload = {
        'customer_id': 'C003',
        'customer_name': 'Charlie Brown',
        'generator_id': 'M004',
        'generator_name': 'Kohler KD1000',
        'start_date': datetime(2025, 7, 1),
        'end_date': datetime(2025, 7, 3),
        'booked_units': [{'id': 'G007', 'serial_number': 'KOH-2023-002'}],
        'total_cost': 1200,
    }
    payload.update(extra)
    return payload


def test_add_booking_prepends_and_counts(store):
    booking = service.add_booking(store, booking_payload(status='Approved'))
    data = store.read()
    assert booking.id == 'B004'
    assert booking.status == 'Pending'
    assert data.bookings[0].id == 'B004'
    assert next(c for c in data.customers if c.id == 'C003').total_bookings == 2


def test_add_booking_unknown_customer(store):
    with pytest.raises(RecordNotFound):
        service.add_booking(store, booking_payload(customer_id='C404'))
    assert len(store.read().bookings) == 3


def test_add_customer_starts_at_zero_bookings(store):
    customer = service.add_customer(store, {
        'name': 'Dana Scully', 'phone': '555-000-1111', 'address': '1 Federal Plaza',
        'type': 'Offline', 'total_bookings': 9,
    })
    assert customer.id == 'C004'
    assert customer.total_bookings == 0
    assert store.read().customers[-1].type == 'Offline'


def test_update_customer_keeps_booking_counter(store):
    service.update_customer(store, 'C001', {'name': 'Alice Cooper', 'total_bookings': 50})
    alice = store.read().customers[0]
    assert alice.name == 'Alice Cooper'
    assert alice.total_bookings == 1
    assert alice.phone == '555-123-4567'


def test_add_generator_defaults_and_unit_ids(store):
    generator = service.add_generator(store, {
        'id': 'M001',
        'name': 'Honda EU7000',
        'capacity': 7,
        'price_per_day': 90,
        'price_per_month': 1800,
        'image_url': 'https://picsum.photos/400/304',
        'fuel_type': 'Petrol',
        'units': [{'id': '', 'serial_number': 'HON-001', 'status': 'Available'}],
    })
    assert generator.id == 'M005'
    assert generator.featured is False
    assert generator.description == ''
    assert generator.units[0].id.startswith('U')
    assert store.read().find_generator('M005').available_units == 1


def test_update_generator_replaces_units(store):
    service.update_generator(store, 'M003', {
        'price_per_day': 175,
        'units': [
            {'id': 'G005', 'serial_number': 'GEN-2023-001', 'status': 'Maintenance'},
            {'id': '', 'serial_number': 'GEN-2024-002', 'status': 'Available'},
        ],
    })
    generator = store.read().find_generator('M003')
    assert generator.price_per_day == 175
    assert generator.name == 'Generac SD200'
    assert [u.status for u in generator.units] == ['Maintenance', 'Available']


def test_update_unknown_generator(store):
    with pytest.raises(RecordNotFound):
        service.update_generator(store, 'M404', {'name': 'Ghost'})


def test_payments(store):
    payment = service.add_payment(store, {'booking_id': 'B002', 'amount': 900, 'method': 'Cash', 'status': 'Paid'})
    assert payment.id == 'P003'
    assert store.read().payments[0].id == 'P003'
    service.update_payment_status(store, 'P002', 'Paid')
    assert next(p for p in store.read().payments if p.id == 'P002').status == 'Paid'


def test_reviews_are_newest_first(store):
    review = service.add_review(store, {'customer_name': 'Dana', 'rating': 4, 'comment': 'Quiet and reliable unit.'})
    assert review.id == 'R004'
    assert store.read().reviews[0].id == 'R004'


def test_inquiries(store):
    inquiry = service.add_inquiry(store, {
        'customer_name': 'Dana Scully', 'customer_phone': '555-000-1111',
        'generator_id': 'M003', 'generator_name': 'Generac SD200',
    })
    assert inquiry.id == 'I001'
    assert inquiry.status == 'New'
    service.update_inquiry_status(store, 'I001', 'Contacted')
    assert store.read().inquiries[0].status == 'Contacted'


def test_context_refreshes_after_mutation(context):
    context.add_review({'customer_name': 'Dana', 'rating': 5, 'comment': 'Great service overall.'})
    assert context.reviews[0].customer_name == 'Dana'


def test_context_refreshes_after_failed_mutation(context, store):
    # Another writer changes the file behind the cached mirror
    with store.mutate() as data:
        data.customers[0].name = 'Changed Elsewhere'
    with pytest.raises(RecordNotFound):
        context.update_booking_status('B999', 'Approved')
    assert context.customers[0].name == 'Changed Elsewhere'
