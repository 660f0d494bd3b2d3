class JobBoardError(Exception):
    """Base for errors the route handlers turn into a flash + redirect."""

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    default_message = 'Request failed'


class DuplicateEntry(JobBoardError):
    # unique email, or one application per (job, seeker)
    default_message = 'Duplicate entry'


class NotFoundOrForbidden(JobBoardError):
    default_message = 'Not found or not permitted'


class AuthFailure(JobBoardError):
    default_message = 'Invalid email or password.'


class StorageFailure(JobBoardError):
    default_message = 'Storage error'
