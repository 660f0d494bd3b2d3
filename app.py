import sys
import logging
from flask import Flask, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user

import config
import repository
from models import db
from auth import (
    login_manager, authenticate, hash_password, start_session, end_session,
    recruiter_required, seeker_required,
)
from errors import AuthFailure, DuplicateEntry, NotFoundOrForbidden, StorageFailure
from utils import job_fields_from_form

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def create_app(overrides=None):
    app = Flask(__name__, template_folder='templates')
    app.config.update(config.load_config())
    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    login_manager.init_app(app)
    register_routes(app)
    return app


def init_db(app):
    """Verify the database is reachable and create missing tables; exit if it is not."""
    with app.app_context():
        try:
            repository.check_connection()
            db.create_all()
        except Exception as e:
            logger.error('Failed to connect to database: %s', e)
            sys.exit(1)
    logger.info('Connected to database')


def _render_listing(template):
    search_term = request.args.get('term', '')
    try:
        jobs = repository.search_jobs(search_term)
    except StorageFailure:
        logger.exception('Error fetching jobs')
        flash('Could not load job listings.', 'error')
        return render_template(template, jobs=[], searchTerm='')
    return render_template(template, jobs=jobs, searchTerm=search_term)


def register_routes(app):

    # --- auth ---

    @app.route('/register', methods=['GET'])
    def register_form():
        return render_template('register.html', pageTitle='Register')

    @app.route('/register', methods=['POST'])
    def register():
        name = request.form.get('name')
        email = request.form.get('email')
        password = request.form.get('password', '')
        role = request.form.get('role')
        try:
            repository.create_user(name, email, hash_password(password), role)
        except DuplicateEntry:
            flash('Email already in use.', 'error')
            return redirect(url_for('register_form'))
        except StorageFailure:
            logger.exception('Registration failed')
            flash('An error occurred during registration.', 'error')
            return redirect(url_for('register_form'))

        flash(f'Registration successful! Please log in as a {role}.', 'success')
        return redirect(url_for('login'))

    @app.route('/login', methods=['GET'])
    def login():
        return render_template('login.html', pageTitle='Login')

    @app.route('/login', methods=['POST'])
    def login_submit():
        email = request.form.get('email')
        password = request.form.get('password')
        try:
            identity = authenticate(email, password)
        except AuthFailure as e:
            logger.warning('Failed login attempt')
            flash(e.message, 'error')
            return redirect(url_for('login'))
        except StorageFailure:
            logger.exception('Login error')
            flash('An error occurred during login.', 'error')
            return redirect(url_for('login'))

        start_session(identity)
        logger.info('User %s logged in as %s', identity.userId, identity.role)
        flash(f'Welcome back, {identity.name}!', 'success')
        if identity.is_recruiter:
            return redirect(url_for('recruiter_dashboard'))
        return redirect(url_for('signed_in'))

    @app.route('/logout', methods=['POST'])
    def logout():
        end_session()
        return redirect(url_for('index'))

    # --- seekers ---

    @app.route('/signedIn')
    @login_required
    @seeker_required
    def signed_in():
        return _render_listing('signedIn.html')

    @app.route('/search')
    @app.route('/')
    def index():
        return _render_listing('index.html')

    @app.route('/job/<id>')
    def job_details(id):
        has_applied = False
        try:
            job = repository.get_job(id)
            if job is None:
                flash('Job not found.', 'error')
                return redirect(url_for('index'))
            if current_user.is_authenticated and current_user.is_seeker:
                has_applied = repository.has_applied(id, current_user.userId)
        except StorageFailure:
            logger.exception('Error fetching job details')
            flash('Error loading job details.', 'error')
            return redirect(url_for('index'))

        # any recruiter sees the management controls, not only the owner
        is_recruiter_view = current_user.is_authenticated and current_user.is_recruiter
        return render_template('jobDetails.html', job=job, hasApplied=has_applied,
                               isRecruiterView=is_recruiter_view)

    @app.route('/apply/<jobId>', methods=['POST'])
    @login_required
    @seeker_required
    def apply(jobId):
        try:
            repository.create_application(jobId, current_user.userId)
            flash('Application submitted successfully! ✅', 'success')
        except DuplicateEntry:
            flash('You have already applied for this job.', 'error')
        except NotFoundOrForbidden:
            flash('An error occurred while submitting your application.', 'error')
        except StorageFailure:
            logger.exception('Error applying for job')
            flash('An error occurred while submitting your application.', 'error')
        return redirect(url_for('job_details', id=jobId))

    # --- recruiters ---

    @app.route('/recruiter/dashboard')
    @login_required
    @recruiter_required
    def recruiter_dashboard():
        try:
            jobs = repository.list_recruiter_jobs(current_user.userId)
        except StorageFailure:
            logger.exception('Error fetching recruiter jobs')
            flash('Could not load your dashboard.', 'error')
            return redirect(url_for('index'))
        return render_template('recruiter/dashboard.html', jobs=jobs)

    @app.route('/recruiter/post-job', methods=['GET'])
    @login_required
    @recruiter_required
    def post_job_form():
        return render_template('recruiter/postJob.html', job=None, action=url_for('post_job'))

    @app.route('/recruiter/post-job', methods=['POST'])
    @login_required
    @recruiter_required
    def post_job():
        try:
            repository.create_job(current_user.userId, job_fields_from_form(request.form))
        except (DuplicateEntry, StorageFailure):
            logger.exception('Error posting new job')
            flash('Failed to post job. Please check your data.', 'error')
            return redirect(url_for('post_job_form'))

        flash('New job posted successfully! 🎉', 'success')
        return redirect(url_for('recruiter_dashboard'))

    @app.route('/recruiter/edit-job/<id>', methods=['GET'])
    @login_required
    @recruiter_required
    def edit_job_form(id):
        try:
            job = repository.get_owned_job(id, current_user.userId)
        except NotFoundOrForbidden:
            flash('Job not found or you do not have permission to edit it.', 'error')
            return redirect(url_for('recruiter_dashboard'))
        except StorageFailure:
            logger.exception('Error fetching job for edit')
            flash('Error loading job details for editing.', 'error')
            return redirect(url_for('recruiter_dashboard'))
        return render_template('recruiter/postJob.html', job=job,
                               action=url_for('edit_job', id=id))

    @app.route('/recruiter/edit-job/<id>', methods=['POST'])
    @login_required
    @recruiter_required
    def edit_job(id):
        fields = job_fields_from_form(request.form)
        try:
            repository.update_job(id, current_user.userId, fields)
        except NotFoundOrForbidden:
            flash('Job not found or you do not have permission to edit it.', 'error')
            return redirect(url_for('recruiter_dashboard'))
        except (DuplicateEntry, StorageFailure):
            logger.exception('Error updating job')
            flash('Failed to update job.', 'error')
            return redirect(url_for('edit_job_form', id=id))

        flash(f'Job "{fields["title"]}" updated successfully! ✏️', 'success')
        return redirect(url_for('recruiter_dashboard'))

    @app.route('/recruiter/delete-job/<id>', methods=['POST'])
    @login_required
    @recruiter_required
    def delete_job(id):
        try:
            repository.delete_job(id, current_user.userId)
            flash('Job deleted successfully! 🗑️', 'success')
        except NotFoundOrForbidden:
            flash('Job not found or you do not have permission to delete it.', 'error')
        except StorageFailure:
            logger.exception('Error deleting job')
            flash('Failed to delete job.', 'error')
        return redirect(url_for('recruiter_dashboard'))

    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('404.html', pageTitle='Page Not Found'), 404


def main():
    app = create_app()
    init_db(app)
    logger.info('Server running on http://%s:%s', config.HOST, config.PORT)
    app.run(host=config.HOST, port=config.PORT, debug=False)


if __name__ == '__main__':
    main()
