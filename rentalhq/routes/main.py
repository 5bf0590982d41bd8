from datetime import date, timedelta
from flask import Blueprint, render_template, request, flash, redirect, url_for, session, current_app, abort
from rentalhq.extensions import data
from rentalhq.forms.forms import CheckoutForm, OtpForm, InquiryForm, ReviewForm, RecommendationForm
from rentalhq.services import booking_service, catalog_service
from rentalhq.routes import store_errors, safe_next
from rentalhq.services.cart import Cart
from rentalhq.services.recommendation_service import (
    RecommendationCriteria, RecommendationUnavailable, find_generator,
)
from rentalhq.services.validation_service import verify_otp, normalize_phone
from rentalhq.utils import to_datetime

main = Blueprint('main', __name__)


# --- CART HELPERS (the cart lives in the signed session cookie) ---
def current_cart():
    return Cart(session.get('cart', {}), data.generators)


def save_cart(cart):
    session['cart'] = dict(cart.lines)
    session.modified = True


def _get_generator_or_404(generator_id):
    generator = data.get_generator(generator_id)
    if generator is None:
        abort(404)
    return generator


# --- STOREFRONT ---
@main.route('/')
def index():
    featured = catalog_service.featured_generators(data.generators)
    return render_template('index.html', featured=featured, form=RecommendationForm())


@main.route('/recommend', methods=['POST'])
def recommend():
    form = RecommendationForm()
    featured = catalog_service.featured_generators(data.generators)
    recommendation = None
    error = None
    if form.validate_on_submit():
        criteria = RecommendationCriteria(
            use_case=form.use_case.data,
            power_needs=form.power_needs.data,
            budget=form.budget.data,
        )
        try:
            recommendation = find_generator(
                criteria,
                data.generators,
                api_key=current_app.config.get('GEMINI_API_KEY'),
                model=current_app.config.get('GEMINI_MODEL'),
                timeout=current_app.config.get('GEMINI_TIMEOUT', 30),
            )
            if not recommendation:
                error = ("Sorry, we couldn't find a matching generator based on your needs. "
                         "Please try adjusting your criteria.")
        except RecommendationUnavailable as e:
            current_app.logger.error(f"AI recommendation failed: {e}")
            error = "An unexpected error occurred. Please try again later."
    return render_template('index.html', featured=featured, form=form,
                           recommendation=recommendation, error=error)


@main.route('/generators')
def generators():
    max_capacity_limit, max_price_limit = catalog_service.catalog_limits(data.generators)
    max_capacity = request.args.get('max_capacity', default=max_capacity_limit, type=float)
    max_price = request.args.get('max_price', default=max_price_limit, type=float)
    fuel_type = request.args.get('fuel_type', default='All')
    results = catalog_service.filter_catalog(data.generators, max_capacity, max_price, fuel_type)
    return render_template('generators.html',
                           generators=results,
                           cart=current_cart(),
                           max_capacity=max_capacity,
                           max_price=max_price,
                           fuel_type=fuel_type,
                           max_capacity_limit=max_capacity_limit,
                           max_price_limit=max_price_limit)


# --- CART ---
@main.route('/cart/add/<generator_id>', methods=['POST'])
def add_to_cart(generator_id):
    generator = _get_generator_or_404(generator_id)
    cart = current_cart()
    if not cart.add(generator_id):
        flash(f'{generator.name} is out of stock. Leave your details and we will contact you.', 'warning')
        return redirect(url_for('main.inquire', generator_id=generator_id))
    save_cart(cart)
    flash(f'{generator.name} has been added to your cart.', 'success')
    next_page = safe_next(request.form.get('next'))
    if next_page:
        return redirect(next_page)
    return redirect(url_for('main.generators'))


@main.route('/cart/update/<generator_id>', methods=['POST'])
def update_cart(generator_id):
    generator = _get_generator_or_404(generator_id)
    quantity = request.form.get('quantity', type=int)
    if quantity is None:
        flash('Invalid quantity.', 'danger')
        return redirect(url_for('main.cart'))
    cart = current_cart()
    if not cart.update_quantity(generator_id, quantity):
        flash(f'Only {cart.available_units(generator_id)} unit(s) of {generator.name} are available.', 'warning')
        return redirect(url_for('main.inquire', generator_id=generator_id))
    save_cart(cart)
    return redirect(url_for('main.cart'))


@main.route('/cart/remove/<generator_id>', methods=['POST'])
def remove_from_cart(generator_id):
    cart = current_cart()
    cart.remove(generator_id)
    save_cart(cart)
    return redirect(url_for('main.cart'))


@main.route('/cart', methods=['GET', 'POST'])
def cart():
    cart = current_cart()
    form = CheckoutForm()
    if request.method == 'GET' and not form.start_date.data:
        form.start_date.data = date.today()
        form.end_date.data = date.today() + timedelta(days=7)

    if form.validate_on_submit():
        if not len(cart):
            flash('Your cart is empty.', 'warning')
            return redirect(url_for('main.generators'))
        # The booking is only created once the phone number is verified
        session['pending_checkout'] = {
            'name': form.name.data.strip(),
            'phone': normalize_phone(form.phone.data),
            'address': form.address.data.strip(),
            'start_date': form.start_date.data.isoformat(),
            'end_date': form.end_date.data.isoformat(),
        }
        flash("We've sent a one-time password (OTP) to your phone.", 'info')
        return redirect(url_for('main.verify_checkout'))

    start = to_datetime(form.start_date.data)
    end = to_datetime(form.end_date.data)
    return render_template('cart.html',
                           cart=cart,
                           form=form,
                           rental_days=cart.rental_days(start, end),
                           total_cost=cart.total_cost(start, end))


@main.route('/cart/verify', methods=['GET', 'POST'])
def verify_checkout():
    pending = session.get('pending_checkout')
    if not pending:
        return redirect(url_for('main.cart'))
    form = OtpForm()
    otp_length = current_app.config.get('OTP_LENGTH', 6)

    if form.validate_on_submit():
        verified, message = verify_otp(pending['phone'], form.otp.data, otp_length)
        if not verified:
            flash(message, 'danger')
            return render_template('verify_otp.html', form=form, otp_length=otp_length,
                                   title='Verify Your Phone Number')
        cart = current_cart()
        booking = None
        with store_errors():
            booking = booking_service.checkout(
                data,
                cart.lines,
                name=pending['name'],
                phone=pending['phone'],
                address=pending['address'],
                start=to_datetime(pending['start_date']),
                end=to_datetime(pending['end_date']),
            )
        if booking is None:
            return redirect(url_for('main.cart'))
        cart.clear()
        save_cart(cart)
        session.pop('pending_checkout', None)
        return redirect(url_for('main.confirmation', booking_id=booking.id))

    return render_template('verify_otp.html', form=form, otp_length=otp_length,
                           title='Verify Your Phone Number')


@main.route('/confirmation')
def confirmation():
    booking_id = request.args.get('booking_id', 'N/A')
    return render_template('confirmation.html', booking_id=booking_id, booking=data.get_booking(booking_id))


# --- OUT OF STOCK INQUIRY ---
@main.route('/generators/<generator_id>/inquire', methods=['GET', 'POST'])
def inquire(generator_id):
    generator = _get_generator_or_404(generator_id)
    form = InquiryForm()
    if form.validate_on_submit():
        session['pending_inquiry'] = {
            'generator_id': generator.id,
            'customer_name': form.customer_name.data.strip(),
            'customer_phone': normalize_phone(form.customer_phone.data),
        }
        flash("We've sent a one-time password (OTP) to your phone.", 'info')
        return redirect(url_for('main.verify_inquiry'))
    return render_template('inquiry.html', form=form, generator=generator)


@main.route('/inquiry/verify', methods=['GET', 'POST'])
def verify_inquiry():
    pending = session.get('pending_inquiry')
    if not pending:
        return redirect(url_for('main.generators'))
    generator = _get_generator_or_404(pending['generator_id'])
    form = OtpForm()
    otp_length = current_app.config.get('OTP_LENGTH', 6)
    if form.validate_on_submit():
        verified, message = verify_otp(pending['customer_phone'], form.otp.data, otp_length)
        if verified:
            data.add_inquiry({
                'customer_name': pending['customer_name'],
                'customer_phone': pending['customer_phone'],
                'generator_id': generator.id,
                'generator_name': generator.name,
            })
            session.pop('pending_inquiry', None)
            flash('We have received your inquiry and will contact you shortly.', 'success')
            return redirect(url_for('main.generators'))
        flash(message, 'danger')
    return render_template('verify_otp.html', form=form, otp_length=otp_length,
                           title=f'Inquire Availability: {generator.name}')


# --- REVIEWS ---
@main.route('/reviews', methods=['GET', 'POST'])
def reviews():
    form = ReviewForm()
    if form.validate_on_submit():
        data.add_review({
            'customer_name': form.customer_name.data.strip(),
            'rating': form.rating.data,
            'comment': form.comment.data.strip(),
        })
        flash('Thank you for your review!', 'success')
        return redirect(url_for('main.reviews'))
    return render_template('reviews.html', reviews=data.reviews, form=form)
