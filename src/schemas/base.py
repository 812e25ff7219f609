"""Shared pydantic base for the camelCase JSON wire format."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema whose JSON keys are camelCase (``promptText``, ``deletedAt``).

    Python code uses the snake_case field names; ``populate_by_name`` lets both
    forms validate.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OkResponse(CamelModel):
    """Acknowledgement body for mutations that return no resource."""

    ok: bool = True


class CreatedResponse(CamelModel):
    """Body returned by create endpoints (201)."""

    id: str
