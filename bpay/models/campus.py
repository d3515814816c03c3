"""Campus (sede) metadata."""
from beanie import Document, Indexed
from pydantic import BaseModel, Field


class Campus(Document):
    """Campus where students are enrolled; charges carry its name denormalized."""

    name: Indexed(str)
    city: str
    neighborhood: str

    class Settings:
        name = "campuses"
        use_state_management = True


class CampusCreate(BaseModel):
    name: str = Field(min_length=1)
    city: str = Field(min_length=1)
    neighborhood: str = Field(min_length=1)
