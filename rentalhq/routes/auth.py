from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_user, logout_user, current_user
from rentalhq.forms.forms import AdminLoginForm
from rentalhq.models.admin_user import AdminUser
from rentalhq.routes import safe_next
from rentalhq.services.validation_service import log_event

auth = Blueprint('auth', __name__)


@auth.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('admin.dashboard'))

    form = AdminLoginForm()
    if form.validate_on_submit():
        admin = AdminUser.authenticate(form.email.data, form.password.data)
        if admin:
            login_user(admin)
            log_event("Admin Login", "SUCCESS", {"email": admin.email}, ip_address=request.remote_addr)
            next_page = safe_next(request.args.get('next'))
            if next_page:
                return redirect(next_page)
            return redirect(url_for('admin.dashboard'))

        log_event("Admin Login", "FAILURE", {"email": form.email.data}, ip_address=request.remote_addr)
        flash('Login failed. Check your email and password.', 'danger')
        return redirect(url_for('auth.login'))

    return render_template('admin/login.html', form=form)


@auth.route('/logout')
def logout():
    logout_user()
    flash('You have been signed out.', 'info')
    return redirect(url_for('auth.login'))
