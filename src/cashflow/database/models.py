"""SQLAlchemy models for cashflow database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Category(Base):
    """Category model; names are unique per transaction type."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    level = Column(String(16), nullable=False, default="empresa")
    sublevel = Column(String(16), nullable=True)
    color = Column(String(16), nullable=True)
    is_fixed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("name", "type", name="uq_category_name_type"),)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model.

    Installment columns are only set for transactions generated from an
    installment plan.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False, default="real")
    payment_status = Column(String(16), nullable=False, default="confirmed")
    origin = Column(String(16), nullable=False, default="business")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    description = Column(String, nullable=True)
    installment_total = Column(Integer, nullable=True)
    installment_current = Column(Integer, nullable=True)
    installment_amount = Column(Numeric(14, 2), nullable=True)
    installment_equal = Column(Boolean, nullable=True)
    installment_parent_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
