# account_service.py
# Customer signup: one User row plus its first Account row.

import logging
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .database import with_transaction
from .errors import PersistenceFailure
from .schemas import SignupForm

log = logging.getLogger(__name__)


class AccountService:
    """Account opening workflow"""

    @staticmethod
    async def create_account(db: AsyncSession, form: SignupForm) -> Dict:
        """
        Create the customer and their account in one transaction.

        The account references the freshly flushed user id; if either insert
        fails both are rolled back, so a user never exists without an account.

        Returns:
            {"success": True, "message": str}; personal data is not echoed.
        Raises:
            PersistenceFailure if the store rejects either write.
        """
        async def _open(session: AsyncSession):
            user = await crud.create_user(session, form)
            account = await crud.create_account(session, user.id, form.account_type, form.initial_deposit)
            return user, account

        try:
            user, account = await with_transaction(db, _open)
        except SQLAlchemyError as e:
            log.error(f"Account opening rolled back (bank={form.bank}, city={form.city}): {e}")
            raise PersistenceFailure(f"Could not create user/account: {e}") from e

        log.info(f"Opened {account.account_type} account {account.id} for user {user.id} (bank={form.bank})")
        return {"success": True, "message": "Account created successfully"}
