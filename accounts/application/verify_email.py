import logging

from accounts.domain.errors import CertificationCodeMismatch, UserNotFound
from accounts.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


async def verify_email(uow: UnitOfWorkPort, user_id: int, certification_code: str) -> None:
    async with uow as transaction:
        user = await transaction.db_users.find_by_id(user_id, for_update=True)
        if user is None:
            raise UserNotFound()
        try:
            user.certify(certification_code)
        except CertificationCodeMismatch:
            logger.warning("certification code mismatch", extra={"user_id": user_id})
            raise
        await transaction.db_users.save(user)
        await transaction.commit()

    logger.info("user activated", extra={"user_id": user_id})
