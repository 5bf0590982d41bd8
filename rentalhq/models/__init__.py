# rentalhq/models/__init__.py
from rentalhq.models.records import (
    AppData, Generator, GeneratorUnit, Booking, BookedUnit, Customer, Payment, Review, Inquiry,
)
