from accounts.domain.entities import UserAccount, is_visible
from accounts.domain.errors import UserNotFound
from accounts.domain.ports.unit_of_work import UnitOfWorkPort


async def get_user_by_email(uow: UnitOfWorkPort, email: str) -> UserAccount:
    normalized_email = email.strip().lower()

    async with uow as transaction:
        user = await transaction.db_users.find_by_email(normalized_email)
    if user is None or not is_visible(user):
        raise UserNotFound()
    return user


async def get_user_by_id(uow: UnitOfWorkPort, user_id: int) -> UserAccount:
    async with uow as transaction:
        user = await transaction.db_users.find_by_id(user_id)
    if user is None or not is_visible(user):
        raise UserNotFound()
    return user
