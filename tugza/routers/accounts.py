from fastapi import APIRouter, status

from ..account_service import AccountService
from ..deps import SessionDep
from ..schemas import SignupForm, SignupResult

accounts_router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@accounts_router.post("", response_model=SignupResult, status_code=status.HTTP_201_CREATED)
async def open_account(form: SignupForm, db_session: SessionDep):
    """Open a bank account: the customer record plus its first account."""
    return await AccountService.create_account(db_session, form)
