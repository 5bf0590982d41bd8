from flask_login import LoginManager
from flask_wtf import CSRFProtect
from rentalhq.data.context import DataContext

login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please sign in to access the admin area.'
login_manager.login_message_category = 'warning'
csrf = CSRFProtect()
data = DataContext()
