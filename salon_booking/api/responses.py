# salon_booking/api/responses.py
"""OperationResult and DomainError to HTTP responses"""
from fastapi import status
from fastapi.responses import JSONResponse

from salon_booking.core.errors import ConflictError, DomainError, NotFoundError, ValidationError
from salon_booking.core.result import OperationResult


def status_for(error: DomainError) -> int:
    if isinstance(error, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def error_response(error: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(error),
        content={"success": False, "error": error.to_dict()},
    )


def result_response(result: OperationResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    if not result.success:
        return error_response(result.error)
    return JSONResponse(status_code=success_status, content=result.to_dict())
