"""Record Schema - payload type served by the demo in-memory store."""

from pydantic import BaseModel, Field


class Record(BaseModel):
    """A named record. id is assigned by the store, never trusted from input."""
    id: int = Field(0, ge=0)
    name: str = ""
