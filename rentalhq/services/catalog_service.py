from datetime import datetime, timezone


def featured_generators(generators):
    return [g for g in generators if g.featured]


def catalog_limits(generators):
    """Upper bounds for the public catalog sliders."""
    max_capacity = max((g.capacity for g in generators), default=0)
    max_price = max((g.price_per_day for g in generators), default=0)
    return max_capacity, max_price


def filter_catalog(generators, max_capacity=None, max_price=None, fuel_type='All'):
    result = []
    for g in generators:
        if max_capacity is not None and g.capacity > max_capacity:
            continue
        if max_price is not None and g.price_per_day > max_price:
            continue
        if fuel_type not in (None, '', 'All') and g.fuel_type != fuel_type:
            continue
        result.append(g)
    return result


def filter_admin_generators(generators, search='', unit_status='All', sort_key='capacity', direction='desc'):
    """Admin table: models with units, searchable by model name or unit serial."""
    result = [g for g in generators if g.units]
    term = (search or '').strip().lower()
    if term:
        result = [
            g for g in result
            if term in g.name.lower() or any(term in u.serial_number.lower() for u in g.units)
        ]
    if unit_status not in (None, '', 'All'):
        result = [g for g in result if any(u.status == unit_status for u in g.units)]
    attr = 'price_per_day' if sort_key == 'pricePerDay' else 'capacity'
    return sorted(result, key=lambda g: getattr(g, attr), reverse=(direction != 'asc'))


def filter_bookings(bookings, status='All', search='', direction='desc'):
    result = list(bookings)
    if status not in (None, '', 'All'):
        result = [b for b in result if b.status == status]
    term = (search or '').strip().lower()
    if term:
        result = [
            b for b in result
            if term in b.customer_name.lower() or term in b.generator_name.lower()
        ]
    return sorted(result, key=lambda b: b.start_date, reverse=(direction != 'asc'))


def filter_inquiries(inquiries, status='All', search=''):
    result = list(inquiries)
    if status not in (None, '', 'All'):
        result = [i for i in result if i.status == status]
    term = (search or '').strip().lower()
    if term:
        result = [
            i for i in result
            if term in i.customer_name.lower() or term in i.generator_name.lower() or term in i.customer_phone
        ]
    return sorted(result, key=lambda i: i.date, reverse=True)


def dashboard_metrics(generators, bookings, payments, today=None):
    today = today or datetime.now(timezone.utc)
    total_units = sum(len(g.units) for g in generators)
    active_bookings = sum(1 for b in bookings if b.status == 'Approved')
    monthly_income = sum(
        p.amount for p in payments
        if p.status == 'Paid'
        and p.transaction_date.year == today.year
        and p.transaction_date.month == today.month
    )
    booking_counts = {}
    for b in bookings:
        booking_counts[b.generator_name] = booking_counts.get(b.generator_name, 0) + 1
    most_rented = max(booking_counts.items(), key=lambda item: item[1])[0] if booking_counts else "N/A"
    return {
        'total_generators': total_units,
        'active_bookings': active_bookings,
        'monthly_income': monthly_income,
        'most_rented': most_rented,
    }
