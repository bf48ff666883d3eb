# export_service.py
# Per-city, per-bank customer export as an .xlsx workbook.

import logging
import re
from io import BytesIO
from typing import List, Sequence

import openpyxl
from openpyxl.styles import Font
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .errors import PersistenceFailure
from .schemas import UserRecord

log = logging.getLogger(__name__)

SHEET_TITLE = "Users"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
COLUMNS = list(UserRecord.model_fields)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def export_filename(city: str, bank: str) -> str:
    city_part = _UNSAFE_FILENAME_CHARS.sub("-", city)
    bank_part = _UNSAFE_FILENAME_CHARS.sub("-", bank)
    return f"user_data_{city_part}_{bank_part}.xlsx"


def _cell_value(value):
    # openpyxl cannot store timezone-aware datetimes
    if hasattr(value, "tzinfo") and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


def build_workbook(records: Sequence[UserRecord]) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for record in records:
        data = record.model_dump()
        ws.append([_cell_value(data[column]) for column in COLUMNS])

    for column in ws.columns:
        width = max(len(str(cell.value or "")) for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(width + 2, 50)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class ExportService:
    """Operator exports of customer records"""

    @staticmethod
    async def export_users(db: AsyncSession, city: str, bank: str) -> List[UserRecord]:
        """All users whose city and bank both equal the given values."""
        try:
            users = await crud.get_users_by_city_and_bank(db, city=city, bank=bank)
        except SQLAlchemyError as e:
            log.error(f"User export query failed (city={city}, bank={bank}): {e}")
            raise PersistenceFailure(str(e)) from e
        log.info(f"Exporting {len(users)} users for city={city} bank={bank}")
        return [UserRecord.model_validate(user) for user in users]

    @staticmethod
    async def export_workbook(db: AsyncSession, city: str, bank: str):
        """Returns (filename, xlsx bytes)."""
        records = await ExportService.export_users(db, city, bank)
        return export_filename(city, bank), build_workbook(records)
