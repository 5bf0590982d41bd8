from contextlib import contextmanager
from urllib.parse import urlsplit
from flask import current_app, flash
from pydantic import ValidationError
from rentalhq.data.service import RecordNotFound
from rentalhq.services.booking_service import CheckoutError, InvalidStatusTransition


@contextmanager
def store_errors():
    """Turns a refused store operation into a danger toast."""
    try:
        yield
    except (RecordNotFound, InvalidStatusTransition, CheckoutError) as e:
        current_app.logger.warning(f"Operation refused: {e}")
        flash(str(e), 'danger')
    except ValidationError as e:
        current_app.logger.warning(f"Operation rejected by validation: {e}")
        flash('Some of the submitted values are invalid.', 'danger')


def safe_next(next_page):
    """Returns ``next_page`` only when it points inside this site."""
    if not next_page or not next_page.startswith('/'):
        return None
    parts = urlsplit(next_page.replace('\\', '/'))
    if parts.scheme or parts.netloc:
        return None
    return next_page
