from decimal import Decimal

import pytest
from pydantic import TypeAdapter

from tugza.errors import ValidationFailure
from tugza.schemas import ExistingUserVoucher, NewUserVoucher, SignupForm, VoucherRequest
from tugza.validation import DENOMINATIONS, IdPhoto, check_id_photo, parse


def test_valid_signup_is_parsed_and_stripped(signup_data):
    signup_data["name"] = "  Abebe Kebede  "
    form = parse(SignupForm, signup_data)

    assert form.name == "Abebe Kebede"
    assert form.initial_deposit == Decimal("500")
    assert form.bank == "coop"


def test_signup_defaults_to_savings(signup_data):
    del signup_data["account_type"]
    form = parse(SignupForm, signup_data)
    assert form.account_type == "savings"


def test_empty_bank_means_no_affiliation(signup_data):
    signup_data["bank"] = ""
    assert parse(SignupForm, signup_data).bank is None


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("name", "A", "Name must be at least 2 characters"),
        ("email", "not-an-email", None),
        ("phone", "091122334", "Phone number must be exactly 10 digits"),
        ("phone", "09112233445", "Phone number must be exactly 10 digits"),
        ("phone", "09112233ab", "Phone number must be exactly 10 digits"),
        ("address", "Bole", "Address must be at least 5 characters"),
        ("state", "", "Please select a state"),
        ("city", "", "Please select a city"),
        ("account_type", "premium", "Please select an account type"),
        ("initial_deposit", 99, "Initial deposit must be at least 100"),
        ("bank", "unknown-bank", "Unknown bank"),
        ("terms", False, "You must accept the terms and conditions"),
        ("phone", "\u0660\u0669\u0661\u0661\u0662\u0662\u0663\u0663\u0664\u0664", "Phone number must be exactly 10 digits"),
        ("initial_deposit", "100.125", None),
        ("initial_deposit", "12345678901", None),
    ],
)
def test_single_signup_violation_names_the_field(signup_data, field, value, message):
    signup_data[field] = value

    with pytest.raises(ValidationFailure) as excinfo:
        parse(SignupForm, signup_data)

    assert list(excinfo.value.errors) == [field]
    if message:
        assert excinfo.value.errors[field] == [message]


def test_missing_terms_is_rejected(signup_data):
    del signup_data["terms"]
    with pytest.raises(ValidationFailure) as excinfo:
        parse(SignupForm, signup_data)
    assert "terms" in excinfo.value.errors


def test_missing_field_reports_required(signup_data):
    del signup_data["email"]
    with pytest.raises(ValidationFailure) as excinfo:
        parse(SignupForm, signup_data)
    assert excinfo.value.errors == {"email": ["This field is required"]}


def test_all_violations_reported_together(signup_data):
    signup_data.update(name="A", phone="123", terms=False)
    with pytest.raises(ValidationFailure) as excinfo:
        parse(SignupForm, signup_data)
    assert set(excinfo.value.errors) == {"name", "phone", "terms"}


@pytest.mark.parametrize("amount", DENOMINATIONS)
def test_every_denomination_is_accepted(amount):
    voucher = parse(ExistingUserVoucher, {"phone": "0911223344", "amount": amount})
    assert voucher.amount == amount


@pytest.mark.parametrize("amount", [0, 5, 25, 150, 1001])
def test_amount_outside_denominations_is_rejected(amount):
    with pytest.raises(ValidationFailure) as excinfo:
        parse(ExistingUserVoucher, {"phone": "0911223344", "amount": amount})
    assert list(excinfo.value.errors) == ["amount"]


def test_form_encoded_amount_is_coerced(new_voucher_data):
    new_voucher_data["amount"] = "300"
    assert parse(NewUserVoucher, new_voucher_data).amount == 300


@pytest.mark.parametrize("tin", ["1234567", "1234567890123456", "12345abc9", "\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668"])
def test_business_tin_must_be_8_to_15_digits(new_voucher_data, tin):
    new_voucher_data["business_tin"] = tin
    with pytest.raises(ValidationFailure) as excinfo:
        parse(NewUserVoucher, new_voucher_data)
    assert excinfo.value.errors == {"business_tin": ["Business TIN must be 8 to 15 digits"]}


def test_voucher_request_is_discriminated_by_kind(new_voucher_data):
    adapter = TypeAdapter(VoucherRequest)

    new = adapter.validate_python({"kind": "new_user", **new_voucher_data})
    existing = adapter.validate_python({"kind": "existing_user", "phone": "0911223344", "amount": 50})

    assert isinstance(new, NewUserVoucher)
    assert isinstance(existing, ExistingUserVoucher)


def test_forms_are_immutable(new_voucher_data):
    voucher = parse(NewUserVoucher, new_voucher_data)
    with pytest.raises(Exception):
        voucher.amount = 1000


def test_photo_checks():
    assert check_id_photo(None) == []
    assert check_id_photo(IdPhoto("id.webp", "image/webp", b"x" * 100)) == []
    assert check_id_photo(IdPhoto("id.png", "image/png", b"x" * 5_000_001)) == ["Max file size is 5MB"]
    assert check_id_photo(IdPhoto("id.gif", "image/gif", b"x")) == ["Only .jpg, .png and .webp formats are supported"]


def test_photo_errors_are_merged_with_form_errors(new_voucher_data):
    new_voucher_data["phone"] = "12"
    photo = IdPhoto("id.gif", "image/gif", b"x")

    with pytest.raises(ValidationFailure) as excinfo:
        parse(NewUserVoucher, new_voucher_data, extra_errors={"id_photo": check_id_photo(photo)})

    assert set(excinfo.value.errors) == {"phone", "id_photo"}


def test_returning_participant_phone_must_use_ascii_digits():
    with pytest.raises(ValidationFailure) as excinfo:
        parse(ExistingUserVoucher, {"phone": "٠٩٢٢٣٣٤٤٥٥", "amount": 100})
    assert excinfo.value.errors == {"phone": ["Phone number must be exactly 10 digits"]}
