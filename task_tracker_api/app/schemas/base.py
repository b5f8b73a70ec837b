"""
Shared pydantic base classes.

The public API uses camelCase keys (``createdAt``, ``ownerId``) while
the Python code uses snake_case attributes.  ``CamelModel`` bridges
the two: fields are serialised under their camelCase alias and request
bodies are accepted under either name.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Confirmation returned by delete endpoints."""

    message: str
