import pytest

from accounts.application.login_user import login_user
from accounts.application.lookup_user import get_user_by_id
from accounts.domain.entities import UserStatus
from accounts.domain.errors import UserNotFound


@pytest.mark.asyncio
async def test_login_sets_last_login_at(uow):
    await login_user(uow, 1)

    user = await get_user_by_id(uow, 1)
    assert user.last_login_at > 0
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_login_uses_injected_clock(uow, fixed_clock):
    await login_user(uow, 1, now_millis=fixed_clock)

    assert uow.db_users.row(1).last_login_at == fixed_clock()


@pytest.mark.asyncio
async def test_login_strictly_increases_timestamp(uow, fixed_clock):
    await login_user(uow, 1, now_millis=fixed_clock)
    await login_user(uow, 1, now_millis=fixed_clock)

    assert uow.db_users.row(1).last_login_at == fixed_clock() + 1


@pytest.mark.asyncio
async def test_login_is_allowed_for_pending_account(uow, fixed_clock):
    await login_user(uow, 2, now_millis=fixed_clock)

    stored = uow.db_users.row(2)
    assert stored.last_login_at == fixed_clock()
    assert stored.status is UserStatus.PENDING


@pytest.mark.asyncio
async def test_login_unknown_user_raises(uow):
    with pytest.raises(UserNotFound):
        await login_user(uow, 999)

    assert uow.committed is False
