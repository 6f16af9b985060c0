from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    func,
)

from expense_tracker.core.database import Base


class Transaction(Base):
    """Income or expense entry; ``category`` holds a category name, not an id."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("kind IN ('income', 'expense')", name="ck_transactions_kind"),
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        Index("idx_transactions_kind", "kind"),
        Index("idx_transactions_date", "date"),
        Index("idx_transactions_category", "category"),
        Index("idx_transactions_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True)
    kind = Column(String(10), nullable=False)  # income or expense
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    description = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


transactions_table = Transaction.__table__
