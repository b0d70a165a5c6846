from dataclasses import dataclass
from enum import Enum

from accounts.domain.errors import CertificationCodeMismatch
from accounts.domain.services import secure_compare


class UserStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"


@dataclass
class UserAccount:
    email: str
    nickname: str
    certification_code: str
    address: str = ""
    id: int | None = None
    status: UserStatus = UserStatus.PENDING
    last_login_at: int | None = None

    def __post_init__(self):
        self.email = (self.email or "").strip().lower()
        if not self.email:
            raise ValueError("email is required")
        if not self.certification_code:
            raise ValueError("certification_code is required")
        self.status = UserStatus(self.status)

    def certify(self, code: str) -> None:
        """
        PENDING -> ACTIVE when `code` matches. Re-certifying an active
        account with the right code is a no-op.
        """
        if not secure_compare(code, self.certification_code):
            raise CertificationCodeMismatch()
        self.status = UserStatus.ACTIVE

    def login(self, now_ms: int) -> None:
        previous = self.last_login_at or 0
        self.last_login_at = max(now_ms, previous + 1)

    def update_profile(
        self, *, address: str | None = None, nickname: str | None = None
    ) -> None:
        if address is not None:
            self.address = address
        if nickname is not None:
            self.nickname = nickname


def is_visible(user: UserAccount) -> bool:
    """Only active accounts can be fetched by the lookup operations."""
    return user.status is UserStatus.ACTIVE
