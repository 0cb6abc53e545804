"""Shared schema bases and small response models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every API schema.

    Fields are snake_case in Python and camelCase on the wire; input
    accepts either spelling.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DeleteResponse(CamelModel):
    success: bool = True


class FieldError(CamelModel):
    field: str
    message: str


class ValidationErrorResponse(CamelModel):
    """Body of every 400 response caused by invalid input."""

    detail: str = "Invalid input"
    errors: list[FieldError]
