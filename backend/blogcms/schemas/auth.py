from pydantic import BaseModel, Field


class Credentials(BaseModel):
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=1024)


class Identity(BaseModel):
    """Public identity fields; never includes the password hash."""

    id: str
    email: str
    is_admin: bool = Field(False, alias="isAdmin")

    class Config:
        populate_by_name = True


class AuthResponse(BaseModel):
    token: str
    email: str
    is_admin: bool = Field(False, alias="isAdmin")

    class Config:
        populate_by_name = True
