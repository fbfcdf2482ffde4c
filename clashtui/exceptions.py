"""
clashtui exceptions
"""


class ClashTuiError(Exception):
    """Base exception for all clashtui errors"""

    pass


class ConfigError(ClashTuiError):
    """Raised when the tui config file is missing or invalid"""

    pass


class ProfileError(ClashTuiError):
    """Raised when a profile cannot be read, updated or applied"""

    pass


class ServiceError(ClashTuiError):
    """Raised when the service manager command fails"""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output
