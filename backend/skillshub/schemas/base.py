from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """JSON request body using the frontend's camelCase keys. Unknown keys are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


def blank_to_none(v):
    """Trim strings; empty or whitespace-only becomes None."""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v
