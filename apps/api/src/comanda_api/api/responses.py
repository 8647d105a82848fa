"""Mapping of dispatcher outcomes onto HTTP statuses."""

from fastapi import status

from comanda_api.services.notifications import ErrorKind

STATUS_BY_ERROR: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PROVIDER: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_status(kind: ErrorKind | None) -> int:
    if kind is None:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return STATUS_BY_ERROR[kind]
