# voucher_service.py
# Digital coin issuance for new and returning participants.

import logging
import secrets
from typing import Dict, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .config import settings
from .database import with_transaction
from .errors import NotFound, PersistenceFailure
from .schemas import ExistingUserVoucher, NewUserVoucher
from .upload_service import UploadClient
from .validation import IdPhoto

log = logging.getLogger(__name__)

COIN_TOKEN_MIN = 100_000_000_000_000
COIN_TOKEN_MAX = 999_999_999_999_999


def generate_coin_token() -> str:
    """Return a random 15-digit decimal string in [COIN_TOKEN_MIN, COIN_TOKEN_MAX]."""
    return str(COIN_TOKEN_MIN + secrets.randbelow(COIN_TOKEN_MAX - COIN_TOKEN_MIN + 1))


class VoucherService:
    """Voucher issuance workflow"""

    @staticmethod
    async def new_coin_token(db: AsyncSession, max_attempts: Optional[int] = None) -> str:
        """Draw tokens until one is not already stored."""
        attempts = max_attempts or settings.COIN_TOKEN_MAX_ATTEMPTS
        for _ in range(attempts):
            token = generate_coin_token()
            if not await crud.coin_token_exists(db, token):
                return token
            log.warning("Coin token collision, drawing again")
        raise PersistenceFailure(f"No unused coin token after {attempts} attempts")

    @staticmethod
    async def issue_voucher(
        db: AsyncSession,
        request: Union[NewUserVoucher, ExistingUserVoucher],
        uploader: Optional[UploadClient] = None,
        photo: Optional[IdPhoto] = None,
    ) -> Dict:
        """
        Issue one digital coin.

        existing_user: identity (name, location, TIN, photo URL) is copied from
        the participant's most recent coin; NotFound if they have none.
        new_user: the ID photo, when given, is uploaded before anything is
        written, and its URL is stored in place of the bytes.

        Returns:
            {"success": True, "amount": int, "coin_token": str}
        Raises:
            NotFound, UpstreamFailure (upload), PersistenceFailure
        """
        if isinstance(request, ExistingUserVoucher):
            try:
                previous = await crud.get_latest_digital_coin_by_phone(db, request.phone)
            except SQLAlchemyError as e:
                log.error(f"Voucher lookup failed for returning participant: {e}")
                raise PersistenceFailure(str(e)) from e
            if previous is None:
                raise NotFound("Participant not found. Please register as a new user.")
            fields = dict(
                name=previous.name,
                country=previous.country,
                state=previous.state,
                city=previous.city,
                business_tin=previous.business_tin,
                id_photo_url=previous.id_photo_url,
            )
        else:
            id_photo_url = ""
            if photo is not None:
                if uploader is None:
                    raise ValueError("An uploader is required to store an ID photo")
                id_photo_url = await uploader.upload(photo)
            fields = dict(
                name=request.name,
                country=request.country,
                state=request.state,
                city=request.city,
                business_tin=request.business_tin,
                id_photo_url=id_photo_url,
            )

        async def _issue(session: AsyncSession):
            token = await VoucherService.new_coin_token(session)
            return await crud.create_digital_coin(
                session, amount=request.amount, phone=request.phone, coin_token=token, **fields
            )

        attempts = settings.COIN_TOKEN_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            try:
                coin = await with_transaction(db, _issue)
                break
            except IntegrityError as e:
                # a concurrent request stored the same token after our check
                log.warning(f"Coin token taken on insert (attempt {attempt}/{attempts}): {e}")
            except SQLAlchemyError as e:
                log.error(f"Voucher issuance failed ({request.kind}): {e}")
                raise PersistenceFailure(str(e)) from e
        else:
            raise PersistenceFailure(f"Coin token still taken on insert after {attempts} attempts")

        log.info(f"Issued digital coin {coin.id} of {coin.amount} ({request.kind})")
        return {"success": True, "amount": coin.amount, "coin_token": coin.coin_token}
