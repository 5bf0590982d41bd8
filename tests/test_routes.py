import pytest
import requests

from rentalhq.data.store import JsonStore
from rentalhq.extensions import data


def stored(app):
    return JsonStore(app.config['DATA_FILE']).read()


def cart_lines(client):
    with client.session_transaction() as session:
        return dict(session.get('cart', {}))


CHECKOUT_FORM = {
    'name': 'Dana Scully',
    'phone': '555-000-1111',
    'address': '1 Federal Plaza, Washington',
    'start_date': '2025-06-01',
    'end_date': '2025-06-07',
}


# --- Storefront ---

def test_home_lists_featured_generators(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'CAT G3516' in response.data
    assert b'Generac SD200' not in response.data


def test_catalog_fuel_filter(client):
    response = client.get('/generators?fuel_type=Petrol')
    assert response.status_code == 200
    assert b'Generac SD200' in response.data
    assert b'Kohler KD1000' not in response.data


def test_add_to_cart(client):
    response = client.post('/cart/add/M001')
    assert response.status_code == 302
    assert cart_lines(client) == {'M001': 1}
    assert b'Cart (1)' in client.get('/generators').data


def test_add_out_of_stock_redirects_to_inquiry(client):
    response = client.post('/cart/add/M003')
    assert response.status_code == 302
    assert '/generators/M003/inquire' in response.headers['Location']
    assert cart_lines(client) == {}


def test_update_beyond_stock_keeps_quantity(client):
    client.post('/cart/add/M001')
    response = client.post('/cart/update/M001', data={'quantity': '3'})
    assert '/generators/M001/inquire' in response.headers['Location']
    assert cart_lines(client) == {'M001': 1}


def test_unknown_generator_is_404(client):
    assert client.post('/cart/add/M404').status_code == 404


def test_checkout_with_otp(client, app):
    client.post('/cart/add/M001')
    client.post('/cart/add/M001')

    response = client.post('/cart', data=CHECKOUT_FORM)
    assert response.status_code == 302
    assert '/cart/verify' in response.headers['Location']
    assert len(stored(app).bookings) == 3

    response = client.post('/cart/verify', data={'otp': '123456'})
    assert response.status_code == 302
    assert 'booking_id=B004' in response.headers['Location']

    booking = stored(app).bookings[0]
    assert booking.id == 'B004'
    assert booking.total_cost == 7000
    assert booking.status == 'Pending'
    assert cart_lines(client) == {}

    page = client.get(response.headers['Location'])
    assert b'B004' in page.data


def test_checkout_rejects_bad_otp(client, app):
    client.post('/cart/add/M004')
    client.post('/cart', data=CHECKOUT_FORM)
    response = client.post('/cart/verify', data={'otp': '12'})
    assert response.status_code == 200
    assert len(stored(app).bookings) == 3
    assert cart_lines(client) == {'M004': 1}


def test_checkout_with_unwritable_store_shows_error(client, app, monkeypatch):
    client.post('/cart/add/M001')
    client.post('/cart', data=CHECKOUT_FORM)
    monkeypatch.setattr(JsonStore, 'write', lambda self, snapshot: None)

    response = client.post('/cart/verify', data={'otp': '123456'})
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/cart')
    assert cart_lines(client) == {'M001': 1}

    page = client.get('/cart')
    assert b'Customer not found.' in page.data


@pytest.mark.parametrize('next_page', ['//evil.example/', '/\\evil.example/', 'https://evil.example/'])
def test_add_to_cart_ignores_offsite_next(client, next_page):
    response = client.post('/cart/add/M001', data={'next': next_page})
    assert response.status_code == 302
    assert 'evil.example' not in response.headers['Location']
    assert response.headers['Location'].endswith('/generators')


def test_add_to_cart_follows_local_next(client):
    response = client.post('/cart/add/M001', data={'next': '/generators?fuel_type=Diesel'})
    assert response.headers['Location'].endswith('/generators?fuel_type=Diesel')


def test_checkout_rejects_reversed_dates(client, app):
    client.post('/cart/add/M004')
    response = client.post('/cart', data=dict(CHECKOUT_FORM, start_date='2025-06-07', end_date='2025-06-01'))
    assert response.status_code == 200
    assert b'End date must be on or after the start date.' in response.data


def test_inquiry_flow(client, app):
    response = client.post('/generators/M003/inquire', data={
        'customer_name': 'Dana Scully', 'customer_phone': '555-000-1111',
    })
    assert '/inquiry/verify' in response.headers['Location']
    response = client.post('/inquiry/verify', data={'otp': '654321'})
    assert response.status_code == 302

    inquiry = stored(app).inquiries[0]
    assert inquiry.generator_id == 'M003'
    assert inquiry.generator_name == 'Generac SD200'
    assert inquiry.status == 'New'


def test_submit_review(client, app):
    response = client.post('/reviews', data={
        'customer_name': 'Dana', 'rating': '4', 'comment': 'Quiet and reliable, would rent again.',
    })
    assert response.status_code == 302
    review = stored(app).reviews[0]
    assert review.rating == 4
    assert b'Quiet and reliable' in client.get('/reviews').data


def test_review_comment_too_short(client, app):
    response = client.post('/reviews', data={'customer_name': 'Dana', 'rating': '4', 'comment': 'Meh'})
    assert response.status_code == 200
    assert len(stored(app).reviews) == 3


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


RECOMMEND_FORM = {'use_case': 'Industrial', 'power_needs': '1800', 'budget': 'Premium'}


def test_recommendation(client, monkeypatch):
    answer = {'candidates': [{'content': {'parts': [
        {'text': '{"generatorId": "M002", "reasoning": "2000 kW with headroom."}'},
    ]}}]}
    monkeypatch.setattr(requests, 'post', lambda url, **kw: FakeResponse(answer))
    response = client.post('/recommend', data=RECOMMEND_FORM)
    assert response.status_code == 200
    assert b'We recommend: Cummins QSK60' in response.data


def test_recommendation_service_down(client, monkeypatch):
    def fake_post(url, **kwargs):
        raise requests.exceptions.Timeout('slow')

    monkeypatch.setattr(requests, 'post', fake_post)
    response = client.post('/recommend', data=RECOMMEND_FORM)
    assert response.status_code == 200
    assert b'An unexpected error occurred' in response.data


# --- Admin ---

def test_admin_requires_login(client):
    response = client.get('/admin/dashboard')
    assert response.status_code == 302
    assert '/admin/login' in response.headers['Location']


def test_admin_login_with_wrong_password(client):
    response = client.post('/admin/login', data={'email': 'admin@rentalhq.com', 'password': 'nope'})
    assert '/admin/login' in response.headers['Location']
    assert client.get('/admin/dashboard').status_code == 302


def test_dashboard(admin_client):
    response = admin_client.get('/admin/dashboard')
    assert response.status_code == 200
    assert b'Most rented' in response.data


def test_admin_pages_do_not_rehash_password(admin_client, monkeypatch):
    from rentalhq.models import admin_user

    calls = []

    def counting_hash(password):
        calls.append(password)
        return 'unused'

    monkeypatch.setattr(admin_user, 'generate_password_hash', counting_hash)
    assert admin_client.get('/admin/dashboard').status_code == 200
    assert admin_client.get('/admin/bookings').status_code == 200
    assert calls == []


def test_logout(admin_client):
    admin_client.get('/admin/logout')
    assert admin_client.get('/admin/dashboard').status_code == 302


def test_approve_and_reject_booking(admin_client, app):
    response = admin_client.post('/admin/bookings/B002/status', data={'status': 'Approved'})
    assert response.status_code == 302
    data = stored(app)
    assert next(b for b in data.bookings if b.id == 'B002').status == 'Approved'
    assert data.find_unit('G005').status == 'Rented'

    admin_client.post('/admin/bookings/B002/status', data={'status': 'Rejected'})
    data = stored(app)
    assert next(b for b in data.bookings if b.id == 'B002').status == 'Rejected'
    assert data.find_unit('G005').status == 'Available'


def test_booking_status_ignores_offsite_next(admin_client):
    response = admin_client.post('/admin/bookings/B002/status',
                                 data={'status': 'Approved', 'next': '//evil.example/'})
    assert response.headers['Location'].endswith('/admin/bookings/B002')


def test_login_ignores_offsite_next(client, app):
    response = client.post('/admin/login?next=//evil.example/', data={
        'email': app.config['ADMIN_EMAIL'], 'password': app.config['ADMIN_PASSWORD'],
    })
    location = response.headers['Location']
    assert 'evil.example' not in location
    assert '/admin' in location


def test_login_follows_local_next(client, app):
    response = client.post('/admin/login?next=/admin/payments', data={
        'email': app.config['ADMIN_EMAIL'], 'password': app.config['ADMIN_PASSWORD'],
    })
    assert response.headers['Location'].endswith('/admin/payments')


def test_rejected_booking_cannot_be_approved(admin_client, app):
    response = admin_client.post('/admin/bookings/B003/status', data={'status': 'Approved'},
                                 follow_redirects=True)
    assert b'was rejected and cannot be changed' in response.data
    assert next(b for b in stored(app).bookings if b.id == 'B003').status == 'Rejected'


def test_booking_list_and_detail(admin_client):
    response = admin_client.get('/admin/bookings?status=Pending')
    assert b'B002' in response.data
    assert b'B001' not in response.data
    detail = admin_client.get('/admin/bookings/B001')
    assert b'CUM-2023-001' in detail.data
    assert admin_client.get('/admin/bookings/B999').status_code == 404


def test_manual_booking(admin_client, app):
    response = admin_client.post('/admin/bookings/new', data={
        'customer_id': 'C002', 'generator_id': 'M004', 'quantity': '1',
        'start_date': '2025-06-01', 'end_date': '2025-06-07',
    })
    assert response.status_code == 302
    booking = stored(app).bookings[0]
    assert booking.source == 'Manual'
    assert booking.generator_name == 'Kohler KD1000'
    assert booking.total_cost == 400 * 7


def test_manual_booking_over_stock(admin_client, app):
    response = admin_client.post('/admin/bookings/new', data={
        'customer_id': 'C002', 'generator_id': 'M004', 'quantity': '2',
        'start_date': '2025-06-01', 'end_date': '2025-06-07',
    })
    assert response.status_code == 200
    assert b'Only 1 unit(s) of Kohler KD1000 available' in response.data
    assert len(stored(app).bookings) == 3


def test_add_generator_with_units(admin_client, app):
    response = admin_client.post('/admin/generators/new', data={
        'name': 'Honda EU7000',
        'capacity': '7',
        'price_per_day': '90',
        'price_per_month': '1800',
        'image_url': 'https://picsum.photos/400/304',
        'fuel_type': 'Petrol',
        'description': '',
        'units-0-unit_id': '',
        'units-0-serial_number': 'HON-001',
        'units-0-status': 'Available',
    })
    assert response.status_code == 302
    generator = stored(app).find_generator('M005')
    assert generator.name == 'Honda EU7000'
    assert generator.featured is False
    assert len(generator.units) == 1
    assert generator.units[0].id.startswith('U')


def test_edit_generator_keeps_unit_ids(admin_client, app):
    page = admin_client.get('/admin/generators/M004/edit')
    assert page.status_code == 200
    assert b'value="G006"' in page.data

    response = admin_client.post('/admin/generators/M004/edit', data={
        'name': 'Kohler KD1000', 'capacity': '1000', 'price_per_day': '420', 'price_per_month': '9500',
        'image_url': 'https://picsum.photos/400/303', 'fuel_type': 'Diesel', 'featured': 'y',
        'units-0-unit_id': 'G006', 'units-0-serial_number': 'KOH-2023-001', 'units-0-status': 'Available',
        'units-1-unit_id': 'G007', 'units-1-serial_number': 'KOH-2023-002', 'units-1-status': 'Available',
        'units-1-delete': 'y',
    })
    assert response.status_code == 302
    generator = stored(app).find_generator('M004')
    assert generator.price_per_day == 420
    assert [(u.id, u.status) for u in generator.units] == [('G006', 'Available')]


def test_generators_admin_search(admin_client):
    response = admin_client.get('/admin/generators?search=CUM')
    assert b'Cummins QSK60' in response.data
    assert b'Kohler KD1000' not in response.data


def test_add_and_edit_customer(admin_client, app):
    response = admin_client.post('/admin/customers/new', data={
        'name': 'Dana Scully', 'phone': '555-000-1111', 'address': '1 Federal Plaza', 'type': 'Offline',
    })
    assert response.status_code == 302
    customer = stored(app).customers[-1]
    assert (customer.id, customer.type, customer.total_bookings) == ('C004', 'Offline', 0)

    admin_client.post('/admin/customers/C001/edit', data={
        'name': 'Alice Cooper', 'phone': '555-123-4567', 'address': '123 Maple St, Springfield, IL', 'type': 'Online',
    })
    alice = stored(app).customers[0]
    assert alice.name == 'Alice Cooper'
    assert alice.total_bookings == 1


def test_record_payment_and_toggle(admin_client, app):
    response = admin_client.post('/admin/payments', data={
        'booking_id': 'B002', 'amount': '900', 'method': 'Cash', 'status': 'Paid',
    })
    assert response.status_code == 302
    assert stored(app).payments[0].id == 'P003'

    admin_client.post('/admin/payments/P002/status', data={'status': 'Paid'})
    assert next(p for p in stored(app).payments if p.id == 'P002').status == 'Paid'


@pytest.mark.parametrize('status', ['Contacted', 'New'])
def test_inquiry_status(admin_client, app, status):
    assert stored(app).inquiries == []
    inquiry = data.add_inquiry({
        'customer_name': 'Dana Scully', 'customer_phone': '555-000-1111',
        'generator_id': 'M003', 'generator_name': 'Generac SD200',
    })
    admin_client.post(f'/admin/inquiries/{inquiry.id}/status', data={'status': status})
    assert stored(app).inquiries[0].status == status
    assert b'Generac SD200' in admin_client.get('/admin/inquiries').data
