# schemas.py
# Pydantic models for request/response validation and serialization.

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

from .validation import (
    check_account_type, check_address, check_amount, check_bank, check_business_tin,
    check_initial_deposit, check_name, check_phone, check_terms, required,
)

Name = Annotated[str, AfterValidator(check_name)]
Phone = Annotated[str, AfterValidator(check_phone)]
Amount = Annotated[int, AfterValidator(check_amount)]


class FormModel(BaseModel):
    """Immutable, whitespace-stripped submission."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_default=True, frozen=True)


# --- Signup ---

class SignupForm(FormModel):
    name: Name
    email: EmailStr
    phone: Phone
    address: Annotated[str, AfterValidator(check_address)]
    state: Annotated[str, AfterValidator(required("Please select a state"))]
    city: Annotated[str, AfterValidator(required("Please select a city"))]
    account_type: Annotated[str, AfterValidator(check_account_type)] = "savings"
    initial_deposit: Annotated[Decimal, Field(max_digits=12, decimal_places=2), AfterValidator(check_initial_deposit)] = Decimal("100")
    bank: Annotated[Optional[str], AfterValidator(check_bank)] = None
    terms: Annotated[bool, AfterValidator(check_terms)] = False


class SignupResult(BaseModel):
    success: bool
    message: str


# --- Digital coin vouchers ---

class NewUserVoucher(FormModel):
    kind: Literal["new_user"] = "new_user"
    name: Name
    country: Annotated[str, AfterValidator(required("Please select a country"))]
    state: Annotated[str, AfterValidator(required("Please select a state"))]
    city: Annotated[str, AfterValidator(required("Please select a city"))]
    phone: Phone
    amount: Amount
    business_tin: Annotated[str, AfterValidator(check_business_tin)]


class ExistingUserVoucher(FormModel):
    kind: Literal["existing_user"] = "existing_user"
    phone: Phone
    amount: Amount


VoucherRequest = Annotated[Union[NewUserVoucher, ExistingUserVoucher], Field(discriminator="kind")]


class VoucherIssued(BaseModel):
    success: bool = True
    amount: int
    coin_token: str


class DigitalCoin(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    country: str
    state: str
    city: str
    amount: int
    generator_phone_number: str
    business_tin: Optional[str] = None
    id_photo_url: str = ""
    coin_token: str
    created_at: Optional[datetime] = None


# --- Users ---

class UserRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    state: Optional[str] = None
    city: str
    address: str
    bank: Optional[str] = None
    created_at: Optional[datetime] = None


class AccountRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_type: str
    initial_deposit: Decimal
    user_id: int


class UserDetail(UserRecord):
    accounts: List[AccountRecord] = []


# --- Reference data ---

class Bank(BaseModel):
    slug: str
    name: str
    description: str
    image: str


class Location(BaseModel):
    id: Annotated[str, BeforeValidator(str)]
    name: str


# --- Auth ---

class Token(BaseModel):
    access_token: str
    token_type: str
