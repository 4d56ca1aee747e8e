"""Exception hierarchy for the Papla Media tools."""


class PaplaError(Exception):
    """Base exception for Papla Media errors."""
    pass


class PaplaConfigurationError(PaplaError):
    """Exception raised for configuration errors."""
    pass


class PaplaResponseError(PaplaError):
    """Exception raised when a successful response has an unexpected shape."""
    pass


class PaplaApiError(PaplaError):
    """
    Exception raised when the API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the response
        body: Raw response body, as text
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Papla API error ({status_code}): {body}")


class FileOutputError(PaplaError):
    """
    Exception raised when an audio file cannot be written.

    Attributes:
        path: The path that was being written
        cause: The underlying filesystem error
    """

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write audio file: {cause}")
