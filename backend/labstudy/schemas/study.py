from typing import Annotated
from pydantic import BaseModel, Field
from labstudy.schemas.common import UtcDateTime

# Bounds mirror the studies table columns
class StudyFields(BaseModel):
    title: Annotated[str, Field(max_length=200)] | None = None
    slug: Annotated[str, Field(max_length=200)] | None = None
    description: str | None = None
    status: Annotated[str, Field(max_length=40)] | None = None
    tags: list[str] | None = None

class StudyCreate(StudyFields):
    pass

class StudyUpdate(StudyFields):
    pass

class StudyRead(BaseModel):
    id: str
    title: str
    slug: str | None = None
    description: str | None = None
    status: str
    tags: list[str] = []
    created_at: UtcDateTime
    updated_at: UtcDateTime

    model_config = {"from_attributes": True}
