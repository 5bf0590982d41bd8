from flask import current_app
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from rentalhq.extensions import login_manager

ADMIN_ID = 'admin'


@login_manager.user_loader
def load_user(user_id):
    if user_id == ADMIN_ID:
        return AdminUser(current_app.config['ADMIN_EMAIL'])
    return None


class AdminUser(UserMixin):
    """The single demo back-office account. Not a real access-control model."""

    def __init__(self, email, password_hash=None):
        self.id = ADMIN_ID
        self.email = email
        self.password_hash = password_hash

    def __repr__(self):
        return f"AdminUser('{self.email}')"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password or '')

    @staticmethod
    def authenticate(email, password):
        config = current_app.config
        if (email or '').strip().lower() != config['ADMIN_EMAIL'].lower():
            return None
        admin = AdminUser(config['ADMIN_EMAIL'])
        admin.set_password(config['ADMIN_PASSWORD'])
        if admin.check_password(password):
            return admin
        return None
