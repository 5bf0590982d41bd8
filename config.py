import os
import tempfile
from dotenv import load_dotenv

# Load values from the .env file into the environment
load_dotenv()

# Project root directory
basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change-me-in-production'

    # --- JSON DATA STORE ---
    DATA_FILE = os.environ.get('DATA_FILE') or os.path.join(basedir, 'instance', 'data.json')

    # --- DEMO ADMIN CREDENTIAL ---
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL') or 'admin@rentalhq.com'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'password'

    # --- AI RECOMMENDATION (Gemini) ---
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL') or 'gemini-2.5-flash'
    GEMINI_TIMEOUT = int(os.environ.get('GEMINI_TIMEOUT', 30))

    # Simulated OTP length
    OTP_LENGTH = 6

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    """Configuration used by the test suite."""
    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = 'test-secret'
    DATA_FILE = os.path.join(tempfile.gettempdir(), 'rentalhq-test-data.json')
    GEMINI_API_KEY = 'test-key'
