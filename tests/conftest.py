import pytest
from datetime import datetime, timedelta
from flask import template_rendered
from sqlalchemy.pool import QueuePool

from app import create_app
from auth import hash_password
from models import db, User, Job

PASSWORD = 'secret123'


@pytest.fixture
def app(tmp_path):
    """App bound to a throwaway SQLite file with a deliberately small pool."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'jobboard.db'}",
        # a leaked connection exhausts this pool within a couple of requests
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'poolclass': QueuePool,
            'pool_size': 2,
            'max_overflow': 0,
            'pool_timeout': 1,
        },
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def captured_templates(app):
    recorded = []

    def record(sender, template, context, **extra):
        recorded.append((template.name, context))

    template_rendered.connect(record, app)
    yield recorded
    template_rendered.disconnect(record, app)


@pytest.fixture
def make_user(app):
    def _make_user(name='Sam Seeker', email='sam@example.com', role='seeker', password=PASSWORD):
        with app.app_context():
            user = User(name=name, email=email, password=hash_password(password), role=role)
            db.session.add(user)
            db.session.commit()
            return user.userId
    return _make_user


@pytest.fixture
def make_job(app):
    counter = {'n': 0}

    def _make_job(recruiter_id, title='Engineer', company='Acme', location='Remote', posted_at=None, **extra):
        counter['n'] += 1
        if posted_at is None:
            posted_at = datetime(2024, 1, 1) + timedelta(minutes=counter['n'])
        with app.app_context():
            job = Job(title=title, description=extra.pop('description', 'Build things.'),
                      company=company, location=location, recruiterId=recruiter_id,
                      postedAt=posted_at, **extra)
            db.session.add(job)
            db.session.commit()
            return job.jobId
    return _make_job


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        return client.post('/login', data={'email': email, 'password': password})
    return _login
