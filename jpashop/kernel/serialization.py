from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase in JSON.

    `from_attributes` lets a model be validated straight from an ORM object;
    every attribute read goes through the mapper, so unloaded lazy
    associations are loaded (or fail) right there.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
