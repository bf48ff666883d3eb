from typing import Annotated
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from . import auth_utils, crud
from .deps import SessionDep
from .schemas import Token

auth_router = APIRouter(tags=["auth"])
log = logging.getLogger(__name__)


@auth_router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db_session: SessionDep
):
    operator = await crud.get_operator_by_email(db_session, email=form_data.username)
    if not operator or not operator.is_active or not auth_utils.verify_password(form_data.password, operator.hashed_password):
        log.warning(f"Failed operator login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"access_token": auth_utils.issue_operator_token(operator.email), "token_type": "bearer"}
