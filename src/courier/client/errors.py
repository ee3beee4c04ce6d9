"""
Courier API client errors.

Failed attempts are collected by the retry loop and folded into a single
exception with ``join_status_errors`` once the loop gives up.
"""

from http import HTTPStatus


class ClientError(Exception):
    """Base class for courier client errors."""


class EndpointRequiredError(ClientError, ValueError):
    def __init__(self, message: str = "endpoint is required"):
        super().__init__(message)


class IDRequiredError(ClientError, ValueError):
    def __init__(self, message: str = "missing ID in request"):
        super().__init__(message)


class InvalidRetriesError(ClientError, ValueError):
    def __init__(self, message: str = "number of retries must be zero or more"):
        super().__init__(message)


class UnexpectedContentTypeError(ClientError):
    """A successful response could not be decoded as JSON."""

    def __init__(self, content_type: str | None):
        super().__init__(f"unexpected content type: {content_type!r}")
        self.content_type = content_type


class DeadlineExceededError(ClientError, TimeoutError):
    """The call deadline expired before an attempt succeeded."""

    def __init__(self, message: str = "request deadline exceeded"):
        super().__init__(message)


class StatusError(ClientError):
    """
    The server answered with a non-success HTTP status.

    Rendered as ``[code]: message``; the message defaults to the status
    reason phrase when the server did not send an error reply.
    """

    def __init__(self, code: int, message: str | None = None):
        if not message:
            try:
                message = HTTPStatus(code).phrase
            except ValueError:
                message = "unknown status"

        super().__init__(f"[{code}]: {message}")
        self.code = code
        self.message = message


class MultiStatusError(ClientError):
    """
    Several distinct errors occurred across the attempts of one call.

    Attributes:
        errors: Distinct errors in the order they were first seen
        attempts: Number of attempts made
        elapsed: Seconds from the first attempt until giving up
    """

    def __init__(self, errors: list[Exception], attempts: int, elapsed: float):
        if not errors:
            raise ValueError("a multi status error requires at least one error")

        self.errors = errors
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(f"after {attempts} attempts: {self.last}")

    @property
    def last(self) -> Exception:
        """The most recent distinct error."""
        return self.errors[-1]


def join_status_errors(
    attempts: int, elapsed: float, *errs: Exception | None
) -> Exception | None:
    """
    Combine the errors of a retried call into at most one exception.

    None entries are dropped and errors with the same message are kept only
    once, in the order they were first seen.

    Returns:
        None if there are no errors, the error itself if only one distinct
        error remains, otherwise a MultiStatusError
    """
    seen: set[str] = set()
    unique: list[Exception] = []
    for err in errs:
        if err is None:
            continue

        key = str(err)
        if key in seen:
            continue

        seen.add(key)
        unique.append(err)

    if not unique:
        return None

    if len(unique) == 1:
        return unique[0]

    return MultiStatusError(unique, attempts=attempts, elapsed=elapsed)
