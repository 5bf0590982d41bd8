"""
Process-wide cached mirror of the data store.

``DataContext`` is registered like any other Flask extension
(``data.init_app(app)``). Each mutating method delegates to the data
service and then re-reads the whole store, so the cached collections
always reflect the latest snapshot on disk.
"""
from typing import List

from rentalhq.data import service
from rentalhq.data.store import JsonStore
from rentalhq.models.records import (
    AppData, Booking, Customer, Generator, Inquiry, Payment, Review,
)


class DataContext:
    def __init__(self, store: JsonStore = None):
        self.store = store
        self.is_loaded = False
        self._data = AppData()
        if store is not None:
            self.refresh()

    def init_app(self, app):
        self.store = JsonStore(app.config['DATA_FILE'])
        app.extensions['data_context'] = self
        self.refresh()

    def refresh(self) -> None:
        self._data = service.get_all_data(self.store)
        self.is_loaded = True

    # --- Collections ---

    @property
    def snapshot(self) -> AppData:
        return self._data

    @property
    def generators(self) -> List[Generator]:
        return self._data.generators

    @property
    def bookings(self) -> List[Booking]:
        return self._data.bookings

    @property
    def payments(self) -> List[Payment]:
        return self._data.payments

    @property
    def customers(self) -> List[Customer]:
        return self._data.customers

    @property
    def reviews(self) -> List[Review]:
        return self._data.reviews

    @property
    def inquiries(self) -> List[Inquiry]:
        return self._data.inquiries

    def get_generator(self, generator_id):
        return self._data.find_generator(generator_id)

    def get_booking(self, booking_id):
        return service.find_booking(self._data, booking_id)

    def get_customer(self, customer_id):
        return next((c for c in self.customers if c.id == customer_id), None)

    # --- Mutations (each one is followed by a full refresh) ---

    def _apply(self, operation, *args):
        try:
            return operation(self.store, *args)
        finally:
            self.refresh()

    def add_booking(self, booking_data: dict) -> Booking:
        return self._apply(service.add_booking, booking_data)

    def update_booking_status(self, booking_id: str, status: str) -> Booking:
        return self._apply(service.update_booking_status, booking_id, status)

    def add_customer(self, customer_data: dict) -> Customer:
        return self._apply(service.add_customer, customer_data)

    def update_customer(self, customer_id: str, customer_data: dict) -> Customer:
        return self._apply(service.update_customer, customer_id, customer_data)

    def add_generator(self, generator_data: dict) -> Generator:
        return self._apply(service.add_generator, generator_data)

    def update_generator(self, generator_id: str, generator_data: dict) -> Generator:
        return self._apply(service.update_generator, generator_id, generator_data)

    def add_payment(self, payment_data: dict) -> Payment:
        return self._apply(service.add_payment, payment_data)

    def update_payment_status(self, payment_id: str, status: str) -> Payment:
        return self._apply(service.update_payment_status, payment_id, status)

    def add_review(self, review_data: dict) -> Review:
        return self._apply(service.add_review, review_data)

    def add_inquiry(self, inquiry_data: dict) -> Inquiry:
        return self._apply(service.add_inquiry, inquiry_data)

    def update_inquiry_status(self, inquiry_id: str, status: str) -> Inquiry:
        return self._apply(service.update_inquiry_status, inquiry_id, status)
