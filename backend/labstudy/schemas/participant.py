from typing import Annotated
from pydantic import BaseModel, Field
from labstudy.schemas.common import UtcDateTime

# Bounds mirror the participants table columns
class ParticipantFields(BaseModel):
    external_id: Annotated[str, Field(max_length=40)] | None = None
    name: Annotated[str, Field(max_length=120)] | None = None
    email: Annotated[str, Field(max_length=255)] | None = None
    phone: Annotated[str, Field(max_length=40)] | None = None
    notes: str | None = None

class ParticipantCreate(ParticipantFields):
    pass

class ParticipantUpdate(ParticipantFields):
    pass

class ParticipantRead(BaseModel):
    id: str
    external_id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = {"from_attributes": True}
