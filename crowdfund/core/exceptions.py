"""Domain failures raised by the services and mapped to HTTP status codes in main.py."""
from fastapi import status


class CrowdfundError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CrowdfundError):
    """Malformed or missing input, duplicate email, bad tag payload."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFoundError(CrowdfundError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(CrowdfundError):
    """Non-owner mutation attempt or a token that fails verification."""
    status_code = status.HTTP_403_FORBIDDEN


class UnauthorizedError(CrowdfundError):
    status_code = status.HTTP_401_UNAUTHORIZED


class BadRequestError(CrowdfundError):
    status_code = status.HTTP_400_BAD_REQUEST
