"""Error taxonomy for the document-to-appeal workflow."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure classes surfaced by the workflow."""

    INVALID_FILE_TYPE = "invalid_file_type"
    IO_FAILURE = "io_failure"
    NETWORK_FAILURE = "network_failure"
    HTTP_STATUS_ERROR = "http_status_error"
    MALFORMED_RESPONSE_JSON = "malformed_response_json"


class AppealWorkflowError(Exception):
    """Base class for every recoverable workflow failure.

    Attributes:
        kind: The ``ErrorKind`` of this failure.
        user_message: A short advisory message safe to show to end users.
    """

    kind: ErrorKind
    user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str, user_message: str | None = None) -> None:
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message


class InvalidFileType(AppealWorkflowError):
    """The uploaded file's content type is not on the allow-list."""

    kind = ErrorKind.INVALID_FILE_TYPE
    user_message = "Please upload a PDF or image file (JPG, PNG)"

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Unsupported content type: {content_type!r}")
        self.content_type = content_type


class IoFailure(AppealWorkflowError):
    """The document bytes could not be read or encoded."""

    kind = ErrorKind.IO_FAILURE
    user_message = "Failed to read file. Please try another document."


class NetworkFailure(AppealWorkflowError):
    """The completion service could not be reached."""

    kind = ErrorKind.NETWORK_FAILURE


class HttpStatusError(AppealWorkflowError):
    """The completion service answered with a non-success status."""

    kind = ErrorKind.HTTP_STATUS_ERROR

    def __init__(self, status_code: int) -> None:
        super().__init__(f"API request failed: {status_code}")
        self.status_code = status_code


class MalformedResponseJSON(AppealWorkflowError):
    """Model output could not be turned into the expected JSON shape."""

    kind = ErrorKind.MALFORMED_RESPONSE_JSON

    def __init__(self, reason: str, raw_text: str) -> None:
        super().__init__(f"Malformed model response: {reason}")
        self.reason = reason
        self.raw_text = raw_text


class InvalidTransition(RuntimeError):
    """A state change was attempted that the workflow does not allow."""
