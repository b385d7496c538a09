# pcforge/errors.py
"""
Domain errors raised by the service layer.

Routers translate these into HTTP responses; ``status_code`` is the code
they map to.
"""


class PcforgeError(Exception):
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PcforgeError):
    status_code = 404


class InvalidPriceInput(PcforgeError, ValueError):
    status_code = 422


class TerminalOrderError(PcforgeError):
    """Raised when a delivered or cancelled order is asked to change."""
    status_code = 409


class InvalidTransitionError(PcforgeError):
    status_code = 409


class QuotationAlreadyDecided(PcforgeError):
    status_code = 409


class PaymentError(PcforgeError):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code
