import logging
from typing import Callable

import accounts.domain.services as domain_services
from accounts.domain.errors import UserNotFound
from accounts.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


async def login_user(
    uow: UnitOfWorkPort,
    user_id: int,
    now_millis: Callable[[], int] = domain_services.current_millis,
) -> None:
    async with uow as transaction:
        user = await transaction.db_users.find_by_id(user_id, for_update=True)
        if user is None:
            raise UserNotFound()
        user.login(now_millis())
        await transaction.db_users.save(user)
        await transaction.commit()

    logger.info(
        "user logged in",
        extra={"user_id": user_id, "last_login_at": user.last_login_at},
    )
