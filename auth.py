"""
Login state and route guards.

The session carries the identity claims written at login. Flask-Login's user
loader turns them into an immutable ``Identity`` at request entry; handlers only
ever read ``current_user``.
"""
import time
import logging
from dataclasses import dataclass, asdict
from functools import wraps

from flask import flash, redirect, session, url_for
from flask_login import LoginManager, UserMixin, current_user, login_user, logout_user
from werkzeug.security import generate_password_hash, check_password_hash

import repository
from config import SESSION_LIFETIME
from errors import AuthFailure

logger = logging.getLogger(__name__)

login_manager = LoginManager()
login_manager.login_view = 'login'
login_manager.login_message = 'Please log in to access this page.'
login_manager.login_message_category = 'error'


@dataclass(frozen=True)
class Identity(UserMixin):
    userId: int
    name: str
    email: str
    role: str
    issuedAt: float

    def get_id(self):
        return str(self.userId)

    @property
    def is_recruiter(self):
        return self.role == 'recruiter'

    @property
    def is_seeker(self):
        return self.role == 'seeker'


def _now():
    return time.time()


def _expired(claims):
    return _now() - claims['issuedAt'] >= SESSION_LIFETIME.total_seconds()


@login_manager.user_loader
def load_user(user_id):
    claims = session.get('identity')
    if not claims or str(claims.get('userId')) != user_id:
        return None
    if _expired(claims):
        logger.info('Session for user %s expired', user_id)
        session.pop('identity', None)
        session.pop('_user_id', None)
        return None
    return Identity(**claims)


def hash_password(password):
    return generate_password_hash(password)


def authenticate(email, password):
    """Identity for a valid email/password pair; AuthFailure otherwise.

    Unknown email and wrong password raise the same error.
    """
    user = repository.find_user_by_email(email)
    if not user or not password or not check_password_hash(user.password, password):
        raise AuthFailure()
    return Identity(userId=user.userId, name=user.name, email=user.email,
                    role=user.role, issuedAt=_now())


def start_session(identity):
    session.clear()
    session.permanent = True
    session['identity'] = asdict(identity)
    login_user(identity)


def end_session():
    logout_user()
    session.clear()


def role_required(role, message):
    """Guard that lets the request through only for ``role``.

    Stack it under ``login_required`` so anonymous users get the login prompt
    instead of this access-denied message.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated or current_user.role != role:
                flash(message, 'error')
                return redirect(url_for('index'))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


recruiter_required = role_required('recruiter', 'Access denied. Recruiter privileges required.')
seeker_required = role_required('seeker', 'Access denied. Job Seeker privileges required.')
