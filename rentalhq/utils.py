# rentalhq/utils.py
import re
import uuid
from datetime import date, datetime, time

_ID_SUFFIX = re.compile(r'^[A-Za-z]+(\d+)$')


def next_id(prefix, records):
    """
    Returns the next sequential id for a collection.
    Example:
        Input: 'B', records with ids B001, B002, B007
        Output: B008
    Ids that do not follow the prefix+number pattern are ignored.
    """
    highest = 0
    for record in records:
        if not record.id.startswith(prefix):
            continue
        match = _ID_SUFFIX.match(record.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}{highest + 1:03d}"


def new_unit_id():
    return f"U{uuid.uuid4().hex[:8].upper()}"


def to_datetime(value):
    """Promotes a form date to a datetime at midnight; datetimes pass through."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return datetime.fromisoformat(value)
