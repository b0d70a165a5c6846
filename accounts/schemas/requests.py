from pydantic import BaseModel, EmailStr, Field


class UserCreateIn(BaseModel):
    email: EmailStr = Field(..., description="The email of the user", max_length=255)
    nickname: str = Field(..., description="Display name", min_length=1, max_length=50)
    address: str = Field("", description="Free-text address", max_length=255)


class UserUpdateIn(BaseModel):
    nickname: str | None = Field(None, min_length=1, max_length=50)
    address: str | None = Field(None, max_length=255)
