from flask_wtf import FlaskForm
from wtforms import (
    Form, StringField, IntegerField, BooleanField, SubmitField, FloatField, TextAreaField,
    SelectField, DateField, HiddenField, PasswordField, FieldList, FormField,
)
from wtforms.validators import DataRequired, Email, Optional, URL, Length, NumberRange, Regexp, ValidationError
from rentalhq.models.records import UNIT_STATUSES, PAYMENT_STATUSES
from rentalhq.services.validation_service import is_valid_phone


def positive(form, field):
    if field.data is None or field.data <= 0:
        raise ValidationError('Must be a positive number.')


def phone_number(form, field):
    if not is_valid_phone(field.data):
        raise ValidationError('Please enter a valid phone number.')


# Form for a single generator unit (nested, no CSRF of its own)
class UnitForm(Form):
    unit_id = HiddenField('Unit ID')
    serial_number = StringField('Serial Number', validators=[DataRequired(), Length(min=3, message='Serial number must be at least 3 characters.')])
    status = SelectField('Status', choices=[(s, s) for s in UNIT_STATUSES], default='Available')
    delete = BooleanField('Remove', default=False)


# Form to create/edit a generator model and its units
class GeneratorForm(FlaskForm):
    name = StringField('Model Name', validators=[DataRequired(), Length(min=3, message='Name must be at least 3 characters.')])
    capacity = FloatField('Capacity (kW)', validators=[DataRequired(), positive])
    price_per_day = FloatField('Price / Day', validators=[DataRequired(), positive])
    price_per_month = FloatField('Price / Month', validators=[DataRequired(), positive])
    image_url = StringField('Image URL', validators=[DataRequired(), URL(message='Please enter a valid image URL.')])
    fuel_type = SelectField('Fuel Type', choices=[('Diesel', 'Diesel'), ('Petrol', 'Petrol')])
    featured = BooleanField('Featured on the home page', default=False)
    description = TextAreaField('Description', validators=[Optional()])
    units = FieldList(FormField(UnitForm), min_entries=0)
    submit = SubmitField('Save Generator')


# Form to create/edit a customer
class CustomerForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(), Length(min=2, message='Name must be at least 2 characters.')])
    phone = StringField('Phone', validators=[DataRequired(), phone_number])
    address = StringField('Address', validators=[DataRequired(), Length(min=5, message='Address must be at least 5 characters.')])
    type = SelectField('Type', choices=[('Online', 'Online'), ('Offline', 'Offline')], default='Offline')
    submit = SubmitField('Save Customer')


class DateRangeMixin:
    def validate_end_date(self, field):
        if self.start_date.data and field.data and field.data < self.start_date.data:
            raise ValidationError('End date must be on or after the start date.')


# Admin manual booking
class ManualBookingForm(DateRangeMixin, FlaskForm):
    customer_id = SelectField('Customer', validators=[DataRequired(message='Please select a customer.')])
    generator_id = SelectField('Generator Model', validators=[DataRequired(message='Please select a model.')])
    quantity = IntegerField('Quantity', default=1, validators=[DataRequired(), NumberRange(min=1)])
    start_date = DateField('Start Date', format='%Y-%m-%d', validators=[DataRequired()])
    end_date = DateField('End Date', format='%Y-%m-%d', validators=[DataRequired()])
    submit = SubmitField('Create Booking')


# Record a payment against a booking
class PaymentForm(FlaskForm):
    booking_id = SelectField('Booking', validators=[DataRequired(message='Please select a booking.')])
    amount = FloatField('Amount', validators=[DataRequired(), positive])
    method = StringField('Method', default='Credit Card', validators=[DataRequired(), Length(min=3, message='Method must be at least 3 characters.')])
    status = SelectField('Status', choices=[(s, s) for s in PAYMENT_STATUSES], default='Paid')
    submit = SubmitField('Record Payment')


# Public checkout ("Request to Book")
class CheckoutForm(DateRangeMixin, FlaskForm):
    name = StringField('Full Name', validators=[DataRequired(), Length(min=2, message='Name must be at least 2 characters.')])
    phone = StringField('Phone Number', validators=[DataRequired(), phone_number])
    address = TextAreaField('Delivery Address', validators=[DataRequired(), Length(min=5, message='Please enter a valid address.')])
    start_date = DateField('Start Date', format='%Y-%m-%d', validators=[DataRequired(message='Start date is required.')])
    end_date = DateField('End Date', format='%Y-%m-%d', validators=[DataRequired(message='End date is required.')])
    submit = SubmitField('Request to Book')


# Simulated one-time password
class OtpForm(FlaskForm):
    otp = StringField('OTP Code', validators=[DataRequired(), Regexp(r'^\d+$', message='Digits only.')])
    submit = SubmitField('Verify & Book')


# Out-of-stock inquiry
class InquiryForm(FlaskForm):
    customer_name = StringField('Full Name', validators=[DataRequired(), Length(min=2, message='Name must be at least 2 characters.')])
    customer_phone = StringField('Phone Number', validators=[DataRequired(), phone_number])
    submit = SubmitField('Send Inquiry')


class ReviewForm(FlaskForm):
    customer_name = StringField('Your Name', validators=[DataRequired(), Length(min=2, message='Name must be at least 2 characters.')])
    rating = SelectField('Rating', coerce=int, choices=[(i, f'{i} star{"s" if i > 1 else ""}') for i in range(5, 0, -1)], default=5,
                         validators=[NumberRange(min=1, max=5)])
    comment = TextAreaField('Comment', validators=[DataRequired(), Length(min=10, max=500, message='Comment must be between 10 and 500 characters.')])
    submit = SubmitField('Submit Review')


class RecommendationForm(FlaskForm):
    use_case = SelectField('Use Case', choices=[
        ('Home Backup', 'Home Backup'), ('Construction Site', 'Construction Site'),
        ('Outdoor Event', 'Outdoor Event'), ('Industrial', 'Industrial'), ('Commercial', 'Commercial'),
    ], validators=[DataRequired(message='Please select a use case.')])
    power_needs = FloatField('Power Needs (kW)', validators=[DataRequired(message='Please enter your power requirement.'), NumberRange(min=1)])
    budget = SelectField('Daily Budget', choices=[('Economy', 'Economy'), ('Standard', 'Standard'), ('Premium', 'Premium')],
                         validators=[DataRequired(message='Please select your budget.')])
    submit = SubmitField('Find My Generator')


class AdminLoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required.')])
    submit = SubmitField('Sign In')


# Generic POST confirmation (approve/reject, status toggles)
class ConfirmForm(FlaskForm):
    submit = SubmitField('Confirm')
