"""
frontdesk/exceptions.py
Domain errors raised by the service layer.

HTML views turn them into flash messages, the REST layer maps them to
400 / 404 / 500 responses through ``frontdesk_exception_handler``.
"""


class FrontDeskError(Exception):
    """Base class for every error a front desk service raises on purpose."""

    default_message = "Front desk operation failed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class ValidationError(FrontDeskError):
    """The caller asked for something the current state does not allow."""

    default_message = "Invalid request."


class NotFound(FrontDeskError):
    default_message = "Requested record does not exist."

    @classmethod
    def for_model(cls, model, pk):
        return cls(f"{model._meta.verbose_name.capitalize()} {pk} not found.")


class InternalError(FrontDeskError):
    """Storage failure while a service was running; the transaction was rolled back."""

    default_message = "An internal error occurred. Please try again."
