# crud.py
# Contains database operations (Create, Read, Update, Delete) for all models.
#
# Create functions only flush: the calling workflow decides where the
# transaction ends (see database.with_transaction).

from typing import Optional, Sequence

from sqlalchemy import exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from . import models, schemas

# --- Users ---

async def get_user(db: AsyncSession, user_id: int) -> Optional[models.User]:
    result = await db.execute(
        select(models.User).options(selectinload(models.User.accounts)).filter(models.User.id == user_id)
    )
    return result.scalar_one_or_none()

async def get_users_by_city_and_bank(db: AsyncSession, city: str, bank: str) -> Sequence[models.User]:
    result = await db.execute(
        select(models.User)
        .filter(models.User.city == city, models.User.bank == bank)
        .order_by(models.User.id)
    )
    return result.scalars().all()

async def create_user(db: AsyncSession, form: schemas.SignupForm) -> models.User:
    db_user = models.User(
        name=form.name,
        email=form.email,
        phone=form.phone,
        state=form.state,
        city=form.city,
        address=form.address,
        bank=form.bank,
    )
    db.add(db_user)
    await db.flush()  # Get the user ID WITHOUT committing yet
    return db_user

async def delete_user(db: AsyncSession, user_id: int) -> Optional[models.User]:
    db_user = await get_user(db, user_id)
    if db_user:
        await db.delete(db_user)
        await db.commit()
    return db_user

# --- Accounts ---

async def create_account(db: AsyncSession, user_id: int, account_type: str, initial_deposit) -> models.Account:
    db_account = models.Account(
        user_id=user_id,
        account_type=account_type or "savings",
        initial_deposit=initial_deposit,
    )
    db.add(db_account)
    await db.flush()
    return db_account

async def get_user_accounts(db: AsyncSession, user_id: int) -> Sequence[models.Account]:
    result = await db.execute(select(models.Account).filter(models.Account.user_id == user_id))
    return result.scalars().all()

# --- Digital coins ---

async def get_latest_digital_coin_by_phone(db: AsyncSession, phone: str) -> Optional[models.DigitalCoin]:
    result = await db.execute(
        select(models.DigitalCoin)
        .filter(models.DigitalCoin.generator_phone_number == phone)
        .order_by(models.DigitalCoin.id.desc())
        .limit(1)
    )
    return result.scalars().first()

async def get_digital_coin_by_token(db: AsyncSession, coin_token: str) -> Optional[models.DigitalCoin]:
    result = await db.execute(select(models.DigitalCoin).filter(models.DigitalCoin.coin_token == coin_token))
    return result.scalar_one_or_none()

async def get_digital_coins_by_phone(db: AsyncSession, phone: str) -> Sequence[models.DigitalCoin]:
    result = await db.execute(
        select(models.DigitalCoin)
        .filter(models.DigitalCoin.generator_phone_number == phone)
        .order_by(models.DigitalCoin.id)
    )
    return result.scalars().all()

async def coin_token_exists(db: AsyncSession, coin_token: str) -> bool:
    result = await db.execute(select(exists().where(models.DigitalCoin.coin_token == coin_token)))
    return bool(result.scalar())

async def create_digital_coin(
    db: AsyncSession,
    *,
    name: str,
    country: str,
    state: str,
    city: str,
    amount: int,
    phone: str,
    coin_token: str,
    business_tin: Optional[str] = None,
    id_photo_url: str = "",
) -> models.DigitalCoin:
    db_coin = models.DigitalCoin(
        name=name,
        country=country,
        state=state,
        city=city,
        amount=amount,
        generator_phone_number=phone,
        business_tin=business_tin,
        id_photo_url=id_photo_url or "",
        coin_token=coin_token,
    )
    db.add(db_coin)
    await db.flush()
    return db_coin

# --- Operators ---

async def get_operator_by_email(db: AsyncSession, email: str) -> Optional[models.Operator]:
    result = await db.execute(select(models.Operator).filter(models.Operator.email == email))
    return result.scalar_one_or_none()

async def create_operator(db: AsyncSession, email: str, hashed_password: str) -> models.Operator:
    db_operator = models.Operator(email=email, hashed_password=hashed_password, is_active=True)
    db.add(db_operator)
    await db.commit()
    await db.refresh(db_operator)
    return db_operator
