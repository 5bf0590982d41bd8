"""
Pydantic records for the JSON data store.

Field names are snake_case in Python and camelCase in the stored document
(``serialNumber``, ``pricePerDay``, ``bookedUnits``...). Always dump with
``by_alias=True`` when writing the snapshot back to disk.
"""
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _as_naive_utc(value: datetime) -> datetime:
    # Stored documents may carry a trailing "Z"; everything in memory is naive UTC.
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


Timestamp = Annotated[datetime, AfterValidator(_as_naive_utc)]

UnitStatus = Literal['Available', 'Rented', 'Maintenance']
FuelType = Literal['Diesel', 'Petrol']
BookingStatus = Literal['Pending', 'Approved', 'Rejected']
BookingSource = Literal['Online', 'Manual']
CustomerType = Literal['Online', 'Offline']
PaymentStatus = Literal['Paid', 'Unpaid']
InquiryStatus = Literal['New', 'Contacted']

UNIT_STATUSES = ('Available', 'Rented', 'Maintenance')
BOOKING_STATUSES = ('Pending', 'Approved', 'Rejected')
PAYMENT_STATUSES = ('Paid', 'Unpaid')
INQUIRY_STATUSES = ('New', 'Contacted')


class Record(BaseModel):
    """Base class shared by every stored record."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


class GeneratorUnit(Record):
    id: str
    serial_number: str
    status: UnitStatus = 'Available'


class Generator(Record):
    id: str
    name: str
    capacity: float
    price_per_day: float
    price_per_month: float
    image_url: str = ''
    fuel_type: FuelType = 'Diesel'
    featured: bool = False
    description: str = ''
    units: List[GeneratorUnit] = Field(default_factory=list)

    @property
    def available_units(self) -> int:
        return sum(1 for unit in self.units if unit.status == 'Available')

    def status_counts(self) -> dict:
        counts = {}
        for unit in self.units:
            counts[unit.status] = counts.get(unit.status, 0) + 1
        return counts

    def __repr__(self):
        return f"Generator('{self.id}', '{self.name}', units={len(self.units)})"


class BookedUnit(Record):
    id: str
    serial_number: str


class Booking(Record):
    id: str
    customer_name: str
    generator_id: str
    generator_name: str
    start_date: Timestamp
    end_date: Timestamp
    status: BookingStatus = 'Pending'
    source: BookingSource = 'Online'
    booked_units: List[BookedUnit] = Field(default_factory=list)
    total_cost: float = 0

    def __repr__(self):
        return f"Booking('{self.id}', '{self.customer_name}', '{self.status}')"


class Customer(Record):
    id: str
    name: str
    phone: str
    address: str = ''
    total_bookings: int = 0
    type: CustomerType = 'Online'


class Payment(Record):
    id: str
    booking_id: str
    amount: float
    method: str
    status: PaymentStatus = 'Unpaid'
    transaction_date: Timestamp


class Review(Record):
    id: str
    customer_name: str
    rating: int = Field(ge=1, le=5)
    comment: str
    date: Timestamp


class Inquiry(Record):
    id: str
    customer_name: str
    customer_phone: str
    generator_id: str
    generator_name: str
    date: Timestamp
    status: InquiryStatus = 'New'


class AppData(Record):
    """The whole snapshot held by the JSON document."""

    generators: List[Generator] = Field(default_factory=list)
    bookings: List[Booking] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    customers: List[Customer] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list)
    inquiries: List[Inquiry] = Field(default_factory=list)

    def find_generator(self, generator_id: str) -> Optional[Generator]:
        return next((g for g in self.generators if g.id == generator_id), None)

    def find_unit(self, unit_id: str) -> Optional[GeneratorUnit]:
        for generator in self.generators:
            for unit in generator.units:
                if unit.id == unit_id:
                    return unit
        return None
