import logging
from dataclasses import dataclass

from accounts.domain.entities import UserAccount
from accounts.domain.errors import UserNotFound
from accounts.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfilePatch:
    address: str | None = None
    nickname: str | None = None


async def update_user(
    uow: UnitOfWorkPort, user_id: int, patch: ProfilePatch
) -> UserAccount:
    async with uow as transaction:
        user = await transaction.db_users.find_by_id(user_id, for_update=True)
        if user is None:
            raise UserNotFound()
        user.update_profile(address=patch.address, nickname=patch.nickname)
        user = await transaction.db_users.save(user)
        await transaction.commit()

    logger.info("user updated", extra={"user_id": user.id})
    return user
