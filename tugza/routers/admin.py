import logging
from typing import Annotated, List

from fastapi import APIRouter, Query
from fastapi.responses import Response

from .. import crud
from ..deps import CurrentOperatorDep, SessionDep
from ..errors import NotFound
from ..export_service import XLSX_MEDIA_TYPE, ExportService
from ..schemas import DigitalCoin, UserDetail, UserRecord

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])
log = logging.getLogger(__name__)

CityQuery = Annotated[str, Query(min_length=1)]
BankQuery = Annotated[str, Query(min_length=1)]


@admin_router.get("/users", response_model=List[UserRecord])
async def export_user_records(city: CityQuery, bank: BankQuery, db_session: SessionDep, operator: CurrentOperatorDep):
    """Raw records of the users in `city` affiliated with `bank`."""
    return await ExportService.export_users(db_session, city, bank)


@admin_router.get("/export")
async def export_user_workbook(city: CityQuery, bank: BankQuery, db_session: SessionDep, operator: CurrentOperatorDep):
    """Same records as /users, as a downloadable .xlsx file."""
    filename, content = await ExportService.export_workbook(db_session, city, bank)
    log.info(f"Operator {operator.email} downloaded {filename}")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@admin_router.get("/users/{user_id}", response_model=UserDetail)
async def read_user(user_id: int, db_session: SessionDep, operator: CurrentOperatorDep):
    user = await crud.get_user(db_session, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@admin_router.delete("/users/{user_id}")
async def remove_user(user_id: int, db_session: SessionDep, operator: CurrentOperatorDep):
    user = await crud.delete_user(db_session, user_id)
    if user is None:
        raise NotFound("User not found")
    log.info(f"Operator {operator.email} deleted user {user_id}")
    return {"success": True}


@admin_router.get("/vouchers", response_model=List[DigitalCoin])
async def list_participant_vouchers(phone: Annotated[str, Query(min_length=10, max_length=10)], db_session: SessionDep, operator: CurrentOperatorDep):
    return await crud.get_digital_coins_by_phone(db_session, phone)


@admin_router.get("/vouchers/{coin_token}", response_model=DigitalCoin)
async def read_voucher(coin_token: str, db_session: SessionDep, operator: CurrentOperatorDep):
    coin = await crud.get_digital_coin_by_token(db_session, coin_token)
    if coin is None:
        raise NotFound("Voucher not found")
    return coin
