"""
Clash controller API exceptions
"""


class ClashError(Exception):
    """Base exception for all controller API errors"""

    pass


class ClashAPIError(ClashError):
    """Raised when a controller request fails"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
