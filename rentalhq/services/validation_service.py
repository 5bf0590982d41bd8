import json
import logging
import re

event_logger = logging.getLogger('rentalhq.events')

_NON_DIGITS = re.compile(r'\D')


def log_event(event_type, status, details, ip_address=None):
    """Central helper to record business events (bookings, logins, inquiries...)."""
    try:
        payload = json.dumps(details, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as e:
        payload = repr(details)
        event_logger.warning("Could not serialise details for %s: %s", event_type, e)
    level = logging.INFO if status == "SUCCESS" else logging.WARNING
    event_logger.log(level, "%s | %s | ip=%s | %s", event_type, status, ip_address or '-', payload)


def normalize_phone(phone):
    return (phone or '').strip()


def is_valid_phone(phone, min_digits=10):
    """A phone number is accepted when it carries at least ``min_digits`` digits."""
    return len(_NON_DIGITS.sub('', phone or '')) >= min_digits


def verify_otp(phone, code, length=6):
    """
    Checks the one-time code sent to ``phone``.
    There is no SMS gateway: any code with the right number of digits is accepted.
    Returns: (success, message_for_user)
    """
    code = (code or '').strip()
    if len(code) == length and code.isdigit():
        log_event("OTP Verification (Simulation)", "SUCCESS", {"phone": phone})
        return True, "Phone number verified."
    log_event("OTP Verification (Simulation)", "FAILURE", {"phone": phone})
    return False, f"Please enter the {length}-digit code sent to your phone."
