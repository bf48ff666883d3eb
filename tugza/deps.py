# deps.py
# Dependency injections for routes: DB session, remote clients, operator authentication.

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from . import auth_utils, crud
from .config import settings
from .database import SessionLocal
from .errors import AuthorizationFailure
from .location_service import LocationClient
from .models import Operator
from .upload_service import UploadClient

log = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_db)]


def get_location_client() -> LocationClient:
    return LocationClient.from_settings(settings)


def get_upload_client() -> UploadClient:
    return UploadClient.from_settings(settings)


LocationClientDep = Annotated[LocationClient, Depends(get_location_client)]
UploadClientDep = Annotated[UploadClient, Depends(get_upload_client)]


async def get_current_operator(db: SessionDep, token: Annotated[str | None, Depends(oauth2_scheme)]) -> Operator:
    """Resolve the operator from an Authorization Bearer header."""
    if not token:
        log.warning("Authentication failed: No token provided.")
        raise AuthorizationFailure("No bearer token")

    claims = auth_utils.read_operator_token(token)
    if claims is None:
        raise AuthorizationFailure("Invalid or expired token")

    operator = await crud.get_operator_by_email(db, email=claims.email)
    if operator is None or not operator.is_active:
        raise AuthorizationFailure(f"Unknown or inactive operator {claims.email}")
    return operator


CurrentOperatorDep = Annotated[Operator, Depends(get_current_operator)]
