from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException


class ApiError(HTTPException):
    """HTTPException carrying a machine-readable error code and type."""

    status: int = 500
    type: str = "InternalServerError"

    def __init__(self, code: str, message: str, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(status_code or self.status, message)
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "type": self.type, "message": self.message, "details": self.details}


class RequestInvalidError(ApiError):
    status = 400
    type = "RequestInvalidError"


class ResourceNotFoundError(ApiError):
    status = 404
    type = "ResourceNotFoundError"


class InternalServerError(ApiError):
    status = 500
    type = "InternalServerError"


class NetworkError(ApiError):
    status = 500
    type = "NetworkError"


def success(data: Any = None) -> Dict[str, Any]:
    if data is None:
        return {"status": "success"}
    return {"status": "success", "data": data}


def failed(error: ApiError) -> Dict[str, Any]:
    return {"status": "failed", "error": error.to_dict()}


def failed_message(message: str) -> Dict[str, Any]:
    return {"status": "failed", "message": message}
