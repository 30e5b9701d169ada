# marketcart/schemas/common.py
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for wire models: snake_case in Python, camelCase on the wire.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel, Generic[T]):
    """
    Envelope shared by every endpoint: `{success, message, data}`.
    """

    success: bool = True
    message: str | None = None
    data: T | None = None
