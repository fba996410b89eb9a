# backend/utils/errors.py


class ExchangeError(Exception):
    """Base for domain failures raised below the route layer."""
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(ExchangeError):
    status_code = 400


class Forbidden(ExchangeError):
    status_code = 403


class NotFound(ExchangeError):
    status_code = 404


class Conflict(ExchangeError):
    status_code = 409
