"""Unified API response envelope.

All API endpoints return this format (top-level fields left as None are
omitted; None values inside ``data`` / ``user`` are kept):
{
    "success": true,
    "message": "...",
    "data": { ... },
    "user": { ... }
}
"""

from typing import Any

from pydantic import BaseModel, SerializerFunctionWrapHandler, model_serializer


class ApiResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: Any = None
    user: Any = None

    @model_serializer(mode="wrap")
    def _drop_unset(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}

    def to_content(self) -> dict[str, Any]:
        return self.model_dump()


def success_response(
    data: Any = None,
    message: str | None = None,
    user: Any = None,
) -> ApiResponse:
    return ApiResponse(success=True, message=message, data=data, user=user)


def error_response(message: str) -> ApiResponse:
    return ApiResponse(success=False, message=message)
