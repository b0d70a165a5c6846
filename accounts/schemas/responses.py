from pydantic import BaseModel, ConfigDict, Field

from accounts.domain.entities import UserStatus


class UserOut(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="The id of the user")
    email: str = Field(..., description="The email of the user")
    nickname: str
    status: UserStatus
    last_login_at: int | None = Field(None, description="Epoch milliseconds")


class MyProfileOut(UserOut):
    """View returned to the account owner."""

    address: str
