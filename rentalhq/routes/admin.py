from flask import Blueprint, render_template, redirect, url_for, request, flash, abort
from flask_login import login_required, current_user
from functools import wraps
from rentalhq.extensions import data
from rentalhq.forms.forms import GeneratorForm, CustomerForm, ManualBookingForm, PaymentForm, ConfirmForm
from rentalhq.models.admin_user import ADMIN_ID
from rentalhq.models.records import UNIT_STATUSES, BOOKING_STATUSES, PAYMENT_STATUSES, INQUIRY_STATUSES
from rentalhq.services import booking_service, catalog_service
from rentalhq.routes import store_errors, safe_next
from rentalhq.utils import to_datetime

admin = Blueprint('admin', __name__)


# --- Admin Required decorator ---
def admin_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if current_user.get_id() != ADMIN_ID:
            return redirect(url_for('main.index'))
        return f(*args, **kwargs)
    return decorated_function


def flash_form_errors(form):
    for field, errors in form.errors.items():
        for error in errors:
            flash(f"Error in field {field}: {error}", 'danger')


# --- Dashboard ---
@admin.route('/')
@admin.route('/dashboard')
@admin_required
def dashboard():
    metrics = catalog_service.dashboard_metrics(data.generators, data.bookings, data.payments)
    return render_template('admin/dashboard.html', metrics=metrics, recent_bookings=data.bookings[:5])


# --- Generators ---
@admin.route('/generators')
@admin_required
def generators_list():
    search = request.args.get('search', '')
    unit_status = request.args.get('unit_status', 'All')
    sort_key = request.args.get('sort', 'capacity')
    direction = request.args.get('direction', 'desc')
    generators = catalog_service.filter_admin_generators(data.generators, search, unit_status, sort_key, direction)
    return render_template('admin/generators.html',
                           generators=generators,
                           search=search,
                           unit_status=unit_status,
                           sort_key=sort_key,
                           direction=direction,
                           unit_statuses=UNIT_STATUSES)


def _generator_payload(form):
    units = [
        {'id': unit['unit_id'], 'serial_number': unit['serial_number'].strip(), 'status': unit['status']}
        for unit in form.units.data
        if not unit['delete']
    ]
    return {
        'name': form.name.data.strip(),
        'capacity': form.capacity.data,
        'price_per_day': form.price_per_day.data,
        'price_per_month': form.price_per_month.data,
        'image_url': form.image_url.data.strip(),
        'fuel_type': form.fuel_type.data,
        'featured': form.featured.data,
        'description': (form.description.data or '').strip(),
        'units': units,
    }


@admin.route('/generators/new', methods=['GET', 'POST'])
@admin_required
def add_generator():
    form = GeneratorForm()
    if request.method == 'GET':
        form.units.append_entry()
    elif 'add_unit' in request.form:
        form.units.append_entry()
    elif form.validate_on_submit():
        with store_errors():
            generator = data.add_generator(_generator_payload(form))
            flash(f'Generator "{generator.name}" added.', 'success')
            return redirect(url_for('admin.generators_list'))
    return render_template('admin/generator_form.html', form=form, title="Add Generator")


@admin.route('/generators/<generator_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_generator(generator_id):
    generator = data.get_generator(generator_id)
    if generator is None:
        abort(404)
    form = GeneratorForm(obj=generator)
    if request.method == 'GET':
        # Unit ids travel in a hidden field so existing units keep their id
        for entry, unit in zip(form.units, generator.units):
            entry.form.unit_id.data = unit.id
    elif 'add_unit' in request.form:
        form.units.append_entry()
    elif form.validate_on_submit():
        with store_errors():
            updated = data.update_generator(generator_id, _generator_payload(form))
            flash(f'Generator "{updated.name}" updated.', 'success')
            return redirect(url_for('admin.generators_list'))
    return render_template('admin/generator_form.html', form=form, generator=generator,
                           title=f"Editing: {generator.name}")


# --- Customers ---
@admin.route('/customers')
@admin_required
def customers_list():
    search = request.args.get('search', '').strip().lower()
    customers = data.customers
    if search:
        customers = [c for c in customers if search in c.name.lower() or search in c.phone]
    return render_template('admin/customers.html', customers=customers, search=search)


@admin.route('/customers/new', methods=['GET', 'POST'])
@admin_required
def add_customer():
    form = CustomerForm()
    if form.validate_on_submit():
        with store_errors():
            customer = data.add_customer({
                'name': form.name.data.strip(),
                'phone': form.phone.data.strip(),
                'address': form.address.data.strip(),
                'type': form.type.data,
            })
            flash(f'Customer {customer.name} added.', 'success')
            return redirect(url_for('admin.customers_list'))
    return render_template('admin/customer_form.html', form=form, title="Add Customer")


@admin.route('/customers/<customer_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_customer(customer_id):
    customer = data.get_customer(customer_id)
    if customer is None:
        abort(404)
    form = CustomerForm(obj=customer)
    if form.validate_on_submit():
        with store_errors():
            data.update_customer(customer_id, {
                'name': form.name.data.strip(),
                'phone': form.phone.data.strip(),
                'address': form.address.data.strip(),
                'type': form.type.data,
            })
            flash('Customer updated.', 'success')
            return redirect(url_for('admin.customers_list'))
    return render_template('admin/customer_form.html', form=form, customer=customer,
                           title=f"Editing: {customer.name}")


# --- Bookings ---
@admin.route('/bookings')
@admin_required
def bookings_list():
    status = request.args.get('status', 'All')
    search = request.args.get('search', '')
    direction = request.args.get('direction', 'desc')
    bookings = catalog_service.filter_bookings(data.bookings, status, search, direction)
    return render_template('admin/bookings.html',
                           bookings=bookings,
                           status=status,
                           search=search,
                           direction=direction,
                           statuses=BOOKING_STATUSES,
                           confirm_form=ConfirmForm())


@admin.route('/bookings/<booking_id>')
@admin_required
def booking_detail(booking_id):
    booking = data.get_booking(booking_id)
    if booking is None:
        abort(404)
    payments = [p for p in data.payments if p.booking_id == booking_id]
    return render_template('admin/booking_detail.html', booking=booking, payments=payments,
                           confirm_form=ConfirmForm())


@admin.route('/bookings/<booking_id>/status', methods=['POST'])
@admin_required
def update_booking_status(booking_id):
    status = request.form.get('status')
    with store_errors():
        booking = data.update_booking_status(booking_id, status)
        flash(f'Booking {booking.id} is now {booking.status}.', 'success')
    next_page = safe_next(request.form.get('next'))
    if next_page:
        return redirect(next_page)
    return redirect(url_for('admin.booking_detail', booking_id=booking_id))


@admin.route('/bookings/new', methods=['GET', 'POST'])
@admin_required
def manual_booking():
    form = ManualBookingForm()
    form.customer_id.choices = [('', 'Select a customer...')] + [
        (c.id, f'{c.name} ({c.phone})') for c in data.customers
    ]
    form.generator_id.choices = [('', 'Select a model...')] + [
        (g.id, f'{g.name} ({g.available_units} available)') for g in data.generators if g.available_units > 0
    ]
    if form.validate_on_submit():
        with store_errors():
            booking = booking_service.create_manual_booking(
                data,
                customer_id=form.customer_id.data,
                generator_id=form.generator_id.data,
                quantity=form.quantity.data,
                start=to_datetime(form.start_date.data),
                end=to_datetime(form.end_date.data),
            )
            flash(f'Manual booking {booking.id} created.', 'success')
            return redirect(url_for('admin.booking_detail', booking_id=booking.id))
    return render_template('admin/manual_booking.html', form=form)


# --- Payments ---
@admin.route('/payments', methods=['GET', 'POST'])
@admin_required
def payments_list():
    form = PaymentForm()
    form.booking_id.choices = [('', 'Select a booking...')] + [
        (b.id, f'{b.id} - {b.customer_name}') for b in data.bookings
    ]
    if request.method == 'GET':
        booking_id = request.args.get('booking_id')
        booking = data.get_booking(booking_id) if booking_id else None
        if booking is not None:
            form.booking_id.data = booking.id
            form.amount.data = booking.total_cost
    elif form.validate_on_submit():
        with store_errors():
            payment = data.add_payment({
                'booking_id': form.booking_id.data,
                'amount': form.amount.data,
                'method': form.method.data.strip(),
                'status': form.status.data,
            })
            flash(f'Payment {payment.id} recorded.', 'success')
            return redirect(url_for('admin.payments_list'))
    else:
        flash_form_errors(form)
    return render_template('admin/payments.html', payments=data.payments, form=form,
                           statuses=PAYMENT_STATUSES, confirm_form=ConfirmForm())


@admin.route('/payments/<payment_id>/status', methods=['POST'])
@admin_required
def update_payment_status(payment_id):
    status = request.form.get('status')
    if status not in PAYMENT_STATUSES:
        flash('Invalid payment status.', 'danger')
        return redirect(url_for('admin.payments_list'))
    with store_errors():
        data.update_payment_status(payment_id, status)
        flash(f'Payment {payment_id} marked as {status}.', 'success')
    return redirect(url_for('admin.payments_list'))


# --- Inquiries ---
@admin.route('/inquiries')
@admin_required
def inquiries_list():
    status = request.args.get('status', 'All')
    search = request.args.get('search', '')
    inquiries = catalog_service.filter_inquiries(data.inquiries, status, search)
    return render_template('admin/inquiries.html', inquiries=inquiries, status=status, search=search,
                           statuses=INQUIRY_STATUSES, confirm_form=ConfirmForm())


@admin.route('/inquiries/<inquiry_id>/status', methods=['POST'])
@admin_required
def update_inquiry_status(inquiry_id):
    status = request.form.get('status')
    if status not in INQUIRY_STATUSES:
        flash('Invalid inquiry status.', 'danger')
        return redirect(url_for('admin.inquiries_list'))
    with store_errors():
        data.update_inquiry_status(inquiry_id, status)
        flash(f'Inquiry {inquiry_id} marked as {status}.', 'success')
    return redirect(url_for('admin.inquiries_list'))
