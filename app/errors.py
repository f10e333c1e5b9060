"""Gateway error taxonomy. Every error maps to one HTTP status."""

from typing import Optional


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(GatewayError):
    status_code = 400


class UnauthorizedError(GatewayError):
    status_code = 403
