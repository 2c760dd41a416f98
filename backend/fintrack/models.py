"""
SQLAlchemy models matching the Drizzle schema.ts structure.
Identifiers are string UUIDs assigned by the storage layer, never by the database.
"""
from sqlalchemy import Boolean, Column, DateTime, Index, Numeric, String, Text

from fintrack.database import Base
from fintrack.schemas import utcnow


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    account_type = Column(String(20), nullable=False)  # checking, savings, credit, investment
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    category_type = Column(String(20), nullable=False)  # income, expense
    color = Column(String(32), nullable=False)  # Hex color
    icon = Column(String(50), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)


class Transaction(Base):
    """
    Transaction row. No foreign keys: account and category references are
    resolved opportunistically by the balance adjustment code.
    """
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    transaction_type = Column(String(20), nullable=False)  # income, expense
    category_id = Column(String(36), nullable=False)
    account_id = Column(String(36), nullable=False)
    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_transactions_account", "account_id"),
        Index("idx_transactions_date", "date"),
    )


class GlossaryTerm(Base):
    __tablename__ = "glossary_terms"

    id = Column(String(36), primary_key=True)
    term = Column(Text, nullable=False)
    definition = Column(Text, nullable=False)
