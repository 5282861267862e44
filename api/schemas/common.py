"""Common Pydantic schemas shared across the API."""

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose wire names are camelCase.

    Attributes stay snake_case in Python; both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_record(self) -> dict:
        """Dump to the JSON-compatible dict stored and sent over the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaginationParams(BaseModel):
    """Pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(default=10, ge=1, description="Items per page")

    @field_validator("page")
    @classmethod
    def validate_page(cls, v: int) -> int:
        """Ensure page is positive."""
        if v < 1:
            raise ValueError("Page must be at least 1")
        return v

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Ensure page_size is positive."""
        if v < 1:
            raise ValueError("Page size must be at least 1")
        return v

    @property
    def offset(self) -> int:
        """Calculate offset from page and page_size."""
        return (self.page - 1) * self.page_size


class Pagination(CamelModel):
    """Pagination metadata returned with every listing."""

    current_page: int = Field(default=1, ge=1, description="Current page number")
    page_size: int = Field(default=10, ge=1, description="Items per page")
    total_items: int = Field(default=0, ge=0, description="Items matching the filters")
    total_pages: int = Field(default=0, ge=0, description="Total number of pages")

    @classmethod
    def create(cls, total: int, pagination: PaginationParams) -> "Pagination":
        """Build metadata for `total` filtered items."""
        total_pages = (total + pagination.page_size - 1) // pagination.page_size
        return cls(
            current_page=pagination.page,
            page_size=pagination.page_size,
            total_items=total,
            total_pages=total_pages,
        )


class SuccessResponse(BaseModel):
    """Acknowledgement returned by deletes and reorders."""

    success: Literal[True] = True


class ErrorResponse(BaseModel):
    """Body of every 4xx and 5xx answer."""

    error: str = Field(description="Error message")
    timestamp: Optional[str] = Field(None, description="When the error was raised (ISO 8601)")
    details: Optional[Any] = Field(None, description="Field errors of a rejected request")


# Documented on every resource router
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid query"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    422: {"model": ErrorResponse, "description": "Request validation failed"},
    500: {"model": ErrorResponse, "description": "Simulated network or storage failure"},
}
