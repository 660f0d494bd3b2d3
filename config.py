import os
import logging
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

SESSION_LIFETIME = timedelta(hours=24)


def _secret_key():
    key = os.environ.get('SECRET_KEY')
    if key:
        return key
    if os.environ.get('APP_ENV', 'development') != 'development':
        logger.warning('SECRET_KEY not set; generating a random key, sessions will not survive a restart')
    return os.urandom(24).hex()


def load_config():
    """Flask config mapping built from the environment."""
    database_url = os.environ.get('DATABASE_URL', 'sqlite:///jobboard.db')
    config = {
        'SECRET_KEY': _secret_key(),
        'SQLALCHEMY_DATABASE_URI': database_url,
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'PERMANENT_SESSION_LIFETIME': SESSION_LIFETIME,
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SAMESITE': 'Lax',
    }
    # sqlite gets the driver defaults from Flask-SQLAlchemy
    if not database_url.startswith('sqlite'):
        config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_size': int(os.environ.get('DB_POOL_SIZE', '10')),
            'max_overflow': 0,
            'pool_pre_ping': True,
        }
    return config


HOST = os.environ.get('HOST', '127.0.0.1')
PORT = int(os.environ.get('PORT', '3000'))
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
