from http import HTTPStatus


class RivalryError(Exception):
    """Base error carrying the HTTP status and a message safe to show players."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SubmissionValidationError(RivalryError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid submission."


class DeadlinePassedError(RivalryError):
    status_code = HTTPStatus.FORBIDDEN
    default_message = "Daily deadline has passed. Come back tomorrow!"


class DuplicateSubmissionError(RivalryError):
    status_code = HTTPStatus.CONFLICT
    default_message = "You have already submitted today. Come back tomorrow!"


class PoolConfigurationError(RivalryError):
    default_message = "Question pool is misconfigured."


class StoreError(RivalryError):
    default_message = "Submission store is unavailable."
