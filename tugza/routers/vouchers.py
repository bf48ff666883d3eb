from typing import Annotated, Optional

from fastapi import APIRouter, Body, File, Form, UploadFile, status

from ..deps import SessionDep, UploadClientDep
from ..schemas import ExistingUserVoucher, NewUserVoucher, VoucherIssued, VoucherRequest
from ..validation import MAX_PHOTO_BYTES, IdPhoto, check_id_photo, parse
from ..voucher_service import VoucherService

vouchers_router = APIRouter(prefix="/api/vouchers", tags=["vouchers"])


@vouchers_router.post("/new", response_model=VoucherIssued, status_code=status.HTTP_201_CREATED)
async def issue_new_user_voucher(
    db_session: SessionDep,
    uploader: UploadClientDep,
    name: Annotated[Optional[str], Form()] = None,
    country: Annotated[Optional[str], Form()] = None,
    state: Annotated[Optional[str], Form()] = None,
    city: Annotated[Optional[str], Form()] = None,
    phone: Annotated[Optional[str], Form()] = None,
    amount: Annotated[Optional[str], Form()] = None,
    business_tin: Annotated[Optional[str], Form()] = None,
    id_photo: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Voucher for a first-time participant (multipart form).

    The optional `id_photo` is checked together with the other fields, then
    uploaded before the voucher is stored.
    """
    photo = None
    if id_photo is not None and id_photo.filename:
        # one byte past the limit is enough to reject an oversized file
        photo = IdPhoto(
            filename=id_photo.filename,
            content_type=id_photo.content_type or "",
            content=await id_photo.read(MAX_PHOTO_BYTES + 1),
        )

    submitted = dict(
        name=name, country=country, state=state, city=city,
        phone=phone, amount=amount, business_tin=business_tin,
    )
    form = parse(
        NewUserVoucher,
        {key: value for key, value in submitted.items() if value is not None},
        extra_errors={"id_photo": check_id_photo(photo)},
    )
    return await VoucherService.issue_voucher(db_session, form, uploader=uploader, photo=photo)


@vouchers_router.post("/existing", response_model=VoucherIssued, status_code=status.HTTP_201_CREATED)
async def issue_existing_user_voucher(form: ExistingUserVoucher, db_session: SessionDep):
    """Voucher for a returning participant, identified by phone number."""
    return await VoucherService.issue_voucher(db_session, form)


@vouchers_router.post("", response_model=VoucherIssued, status_code=status.HTTP_201_CREATED)
async def issue_voucher(request: Annotated[VoucherRequest, Body()], db_session: SessionDep):
    """JSON variant tagged by `kind` (`new_user` or `existing_user`); no photo upload."""
    return await VoucherService.issue_voucher(db_session, request)
