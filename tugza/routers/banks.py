from typing import List

from fastapi import APIRouter

from ..banks import BANKS, get_bank
from ..errors import NotFound
from ..schemas import Bank

banks_router = APIRouter(prefix="/api/banks", tags=["banks"])


@banks_router.get("", response_model=List[Bank])
async def list_banks():
    return BANKS


@banks_router.get("/{slug}", response_model=Bank)
async def read_bank(slug: str):
    bank = get_bank(slug)
    if bank is None:
        raise NotFound("Bank not found")
    return bank
