class ShcwError(Exception):
    """Base exception for all shcw failures"""


class TransportError(ShcwError):
    """Raised when the HTTP exchange itself fails (non-2xx, connection, bad body)"""


class ApiError(ShcwError):
    """Raised when the service answers with a non-zero envelope code"""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class AuthError(ApiError):
    """Raised when login is rejected"""


class FormatError(ShcwError, ValueError):
    """Raised when a wire value cannot be decoded"""


class ConfigError(ShcwError):
    """Raised for bad configuration: holiday table, GPS argument"""
