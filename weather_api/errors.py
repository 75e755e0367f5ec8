"""
API Errors

Every failure a handler can report maps to one of these exceptions. The
application factory renders them as ``{status, message}`` JSON bodies.
"""


class ApiError(Exception):
    """Base class for errors carrying an HTTP status code."""
    status_code = 500
    message = 'Unexpected server error'

    def __init__(self, message=None, **extra):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.extra = extra

    def to_dict(self):
        body = {'status': self.status_code, 'message': self.message}
        body.update(self.extra)
        return body


class InvalidArgument(ApiError):
    status_code = 400
    message = 'Invalid request'


class InvalidReading(InvalidArgument):
    message = 'Invalid weather readings'


class Unauthenticated(ApiError):
    status_code = 401
    message = 'Authentication required'


class InvalidCredentials(ApiError):
    status_code = 401
    message = 'Invalid credentials'


class Forbidden(ApiError):
    status_code = 403
    message = 'You are not authorized to perform the operation.'


class NotFound(ApiError):
    status_code = 404
    message = 'Not found'


class DuplicateEmail(ApiError):
    status_code = 409
    message = 'The provided email address is already associated with an account.'


class StoreFailure(ApiError):
    status_code = 500
    message = 'Database operation failed'
