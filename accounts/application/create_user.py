import logging
from dataclasses import dataclass

import accounts.domain.services as domain_services
from accounts.domain.entities import UserAccount, UserStatus
from accounts.domain.errors import UserAlreadyExists
from accounts.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)

CERTIFICATION_EMAIL_TOPIC = "user.certification_email"


@dataclass(frozen=True)
class UserDraft:
    email: str
    nickname: str
    address: str = ""


async def create_user(
    uow: UnitOfWorkPort,
    draft: UserDraft,
    certification_base_url: str,
) -> UserAccount:
    candidate = UserAccount(
        email=draft.email,
        nickname=draft.nickname,
        address=draft.address,
        status=UserStatus.PENDING,
        certification_code=domain_services.generate_certification_code(),
    )

    async with uow as transaction:
        if await transaction.db_users.find_by_email(candidate.email) is not None:
            raise UserAlreadyExists()
        user = await transaction.db_users.insert(candidate)

        subject, body = domain_services.build_certification_email(
            certification_base_url, user.id, user.certification_code
        )
        await transaction.outbox.enqueue(
            topic=CERTIFICATION_EMAIL_TOPIC,
            payload={"to": user.email, "subject": subject, "body": body},
            idempotency_key=f"certification:{user.id}",
        )
        await transaction.commit()

    logger.info("user created", extra={"user_id": user.id, "status": user.status.value})
    return user
