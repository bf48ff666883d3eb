# models.py
# SQLAlchemy models defining database tables (User, Account, DigitalCoin, Operator).

from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, index=True, nullable=False)
    phone = Column(String(10), nullable=False)
    state = Column(String, nullable=True)
    city = Column(String, index=True, nullable=False)
    address = Column(String, nullable=False)
    bank = Column(String, index=True, nullable=True)  # affiliated bank slug
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan")

class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    account_type = Column(String, nullable=False, default="savings")  # savings, checking, business
    initial_deposit = Column(Numeric(12, 2), nullable=False, default=0)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="accounts")

class DigitalCoin(Base):
    """Digital coin voucher. `coin_token` is the holder's claim check."""
    __tablename__ = "digital_coins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    country = Column(String, nullable=False)
    state = Column(String, nullable=False)
    city = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    generator_phone_number = Column(String(10), index=True, nullable=False)
    business_tin = Column(String(15), nullable=True)
    id_photo_url = Column(String, nullable=False, default="")
    coin_token = Column(String(15), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class Operator(Base):
    """Staff login allowed to export and manage customer records."""
    __tablename__ = "operators"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
