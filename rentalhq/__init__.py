from flask import Flask
from config import Config
from rentalhq.extensions import login_manager, csrf, data


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialise the extensions
    login_manager.init_app(app)
    csrf.init_app(app)
    data.init_app(app)

    # The admin user loader registers itself on import
    from rentalhq.models import admin_user  # noqa: F401

    # Register the blueprints
    from rentalhq.routes.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from rentalhq.routes.auth import auth as auth_blueprint
    app.register_blueprint(auth_blueprint, url_prefix='/admin')

    from rentalhq.routes.admin import admin as admin_blueprint
    app.register_blueprint(admin_blueprint, url_prefix='/admin')

    @app.context_processor
    def inject_cart_count():
        from rentalhq.routes.main import current_cart
        return {'cart_count': current_cart().count}

    return app
