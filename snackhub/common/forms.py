"""
Helpers for multipart endpoints whose fields are validated by Pydantic schemas.
"""
from typing import Type, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_form(schema: Type[SchemaT], data: dict) -> SchemaT:
    """Build schema from form values, reporting failures like body validation errors."""
    cleaned = {k: (None if v == "" else v) for k, v in data.items()}
    try:
        return schema(**cleaned)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("form", *err["loc"])} for err in e.errors(include_url=False)]
        )
