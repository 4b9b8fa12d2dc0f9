class JobBoardError(Exception):
    """Base class for every failure the job board reports to callers."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class InvalidInput(JobBoardError):
    """Malformed query or payload, e.g. a non-positive page number."""

    status_code = 422


class Unauthorized(JobBoardError):
    """A write was attempted on a listing the acting principal does not own."""

    status_code = 403


class NotFound(JobBoardError):
    status_code = 404


class TransientError(JobBoardError):
    """The store or the network did not answer in time; safe to retry."""

    status_code = 503
