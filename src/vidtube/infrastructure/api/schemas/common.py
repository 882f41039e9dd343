"""Response envelopes shared by all endpoints."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: ``{statusCode, data, message, success: true}``."""

    status_code: int = Field(200, description="HTTP status code")
    data: T = Field(..., description="Response payload")
    message: str = Field("Success", description="Human-readable message")
    success: bool = Field(True, description="Always true for successful responses")


class ErrorResponse(CamelModel):
    """Error envelope: ``{statusCode, message, success: false, errors}``."""

    status_code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human-readable error message")
    success: bool = Field(False, description="Always false for errors")
    errors: list[dict[str, Any]] = Field(default_factory=list, description="Error details")
