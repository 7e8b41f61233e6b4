from typing import Annotated
from pydantic import BaseModel, EmailStr, Field, StringConstraints
from labstudy.models.user import UserRole
from labstudy.schemas.common import UtcDateTime

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=120)]

class UserSignup(BaseModel):
    # All optional so a missing field is a 400 from the router, like login errors
    name: NameStr | None = None
    email: EmailStr | None = None
    password: Annotated[str, Field(max_length=128)] | None = None

class UserLogin(BaseModel):
    email: str | None = None
    password: str | None = None

class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    created_at: UtcDateTime | None = None
    model_config = {"from_attributes": True}
