from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from datetime import datetime

# expire_on_commit off: rows stay readable after the connection goes back to the pool
db = SQLAlchemy(session_options={'expire_on_commit': False})


@event.listens_for(Engine, 'connect')
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.startswith('sqlite3'):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


class User(db.Model):
    __tablename__ = 'users'
    __table_args__ = (db.CheckConstraint("role IN ('seeker', 'recruiter')", name='ck_users_role'),)

    userId = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='seeker')  # 'seeker' or 'recruiter'
    createdAt = db.Column(db.DateTime, default=datetime.utcnow)


class Job(db.Model):
    __tablename__ = 'jobs'

    jobId = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    company = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    salary = db.Column(db.String(100))
    experience_required = db.Column(db.String(100))
    skills = db.Column(db.Text)
    recruiterId = db.Column(db.Integer, db.ForeignKey('users.userId', ondelete='CASCADE'),
                            nullable=False, index=True)
    postedAt = db.Column(db.DateTime, default=datetime.utcnow, index=True)


class Application(db.Model):
    __tablename__ = 'applications'

    jobId = db.Column(db.Integer, db.ForeignKey('jobs.jobId', ondelete='CASCADE'), primary_key=True)
    userId = db.Column(db.Integer, db.ForeignKey('users.userId', ondelete='CASCADE'), primary_key=True)
    appliedAt = db.Column(db.DateTime, default=datetime.utcnow)
