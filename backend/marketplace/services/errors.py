class ServiceException(Exception):
    """Base for business-rule failures raised by the services. Never retried."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceException):
    """Referenced entity is missing or does not belong to the caller."""

    status_code = 404


class ConflictError(ServiceException):
    status_code = 409


class InvalidRequestError(ServiceException):
    """Input or state violates a rule (empty cart, bad quantity, illegal transition)."""

    status_code = 400
