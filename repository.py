"""
Storage access for users, jobs and applications.

Every function runs its statement inside ``_statement()``, which commits or rolls
back before returning so the pooled connection is released on every exit path.
Mutations on jobs always filter on ``jobId`` and ``recruiterId`` together.
"""
from contextlib import contextmanager

from sqlalchemy import or_, select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db, User, Job, Application
from errors import DuplicateEntry, NotFoundOrForbidden, StorageFailure
from utils import is_unique_violation, parse_id, search_pattern

LISTING_COLUMNS = (Job.jobId, Job.title, Job.company, Job.location, Job.salary, Job.skills)


@contextmanager
def _statement():
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_unique_violation(e):
            raise DuplicateEntry(str(e.orig)) from e
        raise StorageFailure(str(e.orig)) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageFailure(str(e)) from e
    except Exception:
        db.session.rollback()
        raise


def _job_key(job_id):
    key = parse_id(job_id)
    if key is None:
        raise NotFoundOrForbidden()
    return key


# ── users ────────────────────────────────────────────────────────────────────

def create_user(name, email, password_hash, role):
    with _statement() as session:
        user = User(name=name, email=email, password=password_hash, role=role)
        session.add(user)
        session.flush()
    return user


def find_user_by_email(email):
    with _statement() as session:
        return session.execute(select(User).where(User.email == email)).scalar_one_or_none()


# ── jobs ─────────────────────────────────────────────────────────────────────

def search_jobs(term=''):
    """Jobs whose title, company or location contains ``term``, newest first."""
    pattern = search_pattern(term)
    query = (
        select(*LISTING_COLUMNS)
        .where(or_(
            Job.title.ilike(pattern, escape='\\'),
            Job.company.ilike(pattern, escape='\\'),
            Job.location.ilike(pattern, escape='\\'),
        ))
        .order_by(Job.postedAt.desc(), Job.jobId.desc())
    )
    with _statement() as session:
        return [dict(row._mapping) for row in session.execute(query)]


def get_job(job_id):
    job_id = parse_id(job_id)
    if job_id is None:
        return None
    with _statement() as session:
        return session.get(Job, job_id)


def get_owned_job(job_id, recruiter_id):
    job_id = _job_key(job_id)
    with _statement() as session:
        job = session.execute(
            select(Job).where(Job.jobId == job_id, Job.recruiterId == recruiter_id)
        ).scalar_one_or_none()
    if job is None:
        raise NotFoundOrForbidden()
    return job


def list_recruiter_jobs(recruiter_id):
    query = (
        select(Job)
        .where(Job.recruiterId == recruiter_id)
        .order_by(Job.postedAt.desc(), Job.jobId.desc())
    )
    with _statement() as session:
        return list(session.execute(query).scalars())


def create_job(recruiter_id, fields):
    with _statement() as session:
        job = Job(recruiterId=recruiter_id, **fields)
        session.add(job)
        session.flush()
    return job


def update_job(job_id, recruiter_id, fields):
    job_id = _job_key(job_id)
    stmt = (
        update(Job)
        .where(Job.jobId == job_id, Job.recruiterId == recruiter_id)
        .values(**fields)
    )
    with _statement() as session:
        rowcount = session.execute(stmt).rowcount
    if rowcount == 0:
        raise NotFoundOrForbidden()
    return rowcount


def delete_job(job_id, recruiter_id):
    job_id = _job_key(job_id)
    stmt = (
        delete(Job)
        .where(Job.jobId == job_id, Job.recruiterId == recruiter_id)
    )
    with _statement() as session:
        rowcount = session.execute(stmt).rowcount
    if rowcount == 0:
        raise NotFoundOrForbidden()
    return rowcount


# ── applications ─────────────────────────────────────────────────────────────

def create_application(job_id, user_id):
    job_id = _job_key(job_id)
    with _statement() as session:
        session.add(Application(jobId=job_id, userId=user_id))
        session.flush()


def has_applied(job_id, user_id):
    job_id = parse_id(job_id)
    if job_id is None:
        return False
    with _statement() as session:
        row = session.execute(
            select(Application.jobId).where(Application.jobId == job_id, Application.userId == user_id)
        ).first()
    return row is not None


def check_connection():
    with _statement() as session:
        session.execute(select(1))
