"""
Error types raised while composing a card.

Each error carries the HTTP status code the API answers with; the
application turns them into ``{"error": message}`` responses.
"""

from typing import Optional


class ComposeError(Exception):
    """Base class for failures reported to the client."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingPhotoError(ComposeError):
    status_code = 400

    def __init__(self, message: str = 'Missing file field "photo"'):
        super().__init__(message)


class PayloadTooLargeError(ComposeError):
    status_code = 413

    def __init__(self, limit: int):
        super().__init__(f"Photo exceeds the upload limit of {limit} bytes")
        self.limit = limit


class TemplateNotFoundError(ComposeError):
    """The configured template image is missing on disk."""

    status_code = 500

    def __init__(self, path):
        super().__init__(
            f"Template not found at {path}. "
            "Place your template image there or set TEMPLATE_PATH."
        )
        self.path = path
