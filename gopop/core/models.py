"""
gopop.core.models - Wire models for request and response bodies
=================================================================
"""

from typing import Any, List, Type, Union

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    confloat,
)
from pydantic_core import PydanticSerializationError

from gopop.core.errors import EncodingError


# Positional statement argument. StrictBool comes first so True stays a
# JSON boolean instead of being coerced to 1. NaN and infinities have no
# JSON form and are rejected.
FiniteFloat = confloat(strict=True, allow_inf_nan=False)
ArgValue = Union[StrictBool, StrictInt, FiniteFloat, StrictStr, None]


class CreateRequest(BaseModel):
    """Body of ``POST /v1/databases``."""

    name: str = Field(description="Database name")
    migration: str = Field(description="Full text of the migration script")


class QueryRequest(BaseModel):
    """Body of ``POST /v1/databases/query`` and ``/v1/databases/exec``."""

    name: str = Field(description="Database name")
    query: str = Field(description="Statement text")
    args: List[ArgValue] = Field(
        default_factory=list,
        description="Positional statement arguments",
    )


class ResponseMessage(BaseModel):
    """Generic success body returned by every endpoint."""

    message: str = ""


def encode_payload(model: Type[BaseModel], **fields: Any) -> bytes:
    """
    Validate ``fields`` against ``model`` and return compact JSON bytes.

    Raises
    ------
    EncodingError
        If the fields do not fit the model or cannot be serialized.
    """
    try:
        return model(**fields).model_dump_json().encode("utf-8")
    except (ValidationError, PydanticSerializationError) as exc:
        raise EncodingError(f"cannot encode {model.__name__}: {exc}") from exc
