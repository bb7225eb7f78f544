"""
Uniform response envelope.

Every API response carries a numeric result code, a short status string and a
developer message. Successful responses add ``resultData``; failures may add
``errorDetails``.
"""

import enum
from types import MappingProxyType
from typing import Any, Generic, NamedTuple, Optional, TypeVar

from pydantic import BaseModel, Field


class ResponseKey(str, enum.Enum):
    SUCCESS = "success"
    CREATED = "created"
    VALIDATION_FAIL = "validationFail"
    NOT_FOUND = "notFound"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL_ERROR = "internalError"


class ResponseMeta(NamedTuple):
    result_code: int
    result_status: str
    developer_message: str


BASE_RESPONSES = MappingProxyType({
    ResponseKey.SUCCESS: ResponseMeta(0, "SUCCESS", "Request processed successfully."),
    ResponseKey.CREATED: ResponseMeta(0, "CREATED", "Resource created successfully."),
    ResponseKey.VALIDATION_FAIL: ResponseMeta(
        1001, "VALIDATION_FAIL", "Invalid input data. Please check the provided values."
    ),
    ResponseKey.NOT_FOUND: ResponseMeta(1002, "NOT_FOUND", "The requested resource was not found."),
    ResponseKey.CONFLICT: ResponseMeta(
        1003, "CONFLICT_ERROR", "A conflict occurred, such as a duplicate entry or state mismatch."
    ),
    ResponseKey.UNAUTHORIZED: ResponseMeta(1004, "UNAUTHORIZED", "Authentication failed or is required."),
    ResponseKey.FORBIDDEN: ResponseMeta(
        1005, "FORBIDDEN", "You do not have permission to access this resource or perform this action."
    ),
    ResponseKey.INTERNAL_ERROR: ResponseMeta(
        2001, "INTERNAL_ERROR", "An unexpected internal error occurred. Please try again later."
    ),
})

# HTTP status -> envelope key, for errors raised as plain HTTPException
STATUS_TO_RESPONSE_KEY = MappingProxyType({
    400: ResponseKey.VALIDATION_FAIL,
    401: ResponseKey.UNAUTHORIZED,
    403: ResponseKey.FORBIDDEN,
    404: ResponseKey.NOT_FOUND,
    409: ResponseKey.CONFLICT,
    500: ResponseKey.INTERNAL_ERROR,
})


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every successful payload."""
    result_code: int = Field(..., alias="resultCode")
    result_status: str = Field(..., alias="resultStatus")
    developer_message: str = Field(..., alias="developerMessage")
    result_data: Optional[T] = Field(None, alias="resultData")

    class Config:
        populate_by_name = True


def success_response(
    data: Any = None,
    key: ResponseKey = ResponseKey.SUCCESS,
    message: Optional[str] = None,
) -> ApiResponse:
    """Wrap ``data`` in the success envelope."""
    meta = BASE_RESPONSES[key]
    return ApiResponse(
        result_code=meta.result_code,
        result_status=meta.result_status,
        developer_message=message or meta.developer_message,
        result_data=data,
    )


def error_body(key: ResponseKey, message: Optional[str] = None, details: Any = None) -> dict:
    """Build the JSON body for an error envelope."""
    meta = BASE_RESPONSES[key]
    body = {
        "resultCode": meta.result_code,
        "resultStatus": meta.result_status,
        "developerMessage": message or meta.developer_message,
    }
    if details:
        body["errorDetails"] = details
    return body
