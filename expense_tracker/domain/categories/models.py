from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text, func

from expense_tracker.core.database import Base


class Category(Base):
    """Category model representing transaction categories."""

    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint("kind IN ('income', 'expense')", name="ck_categories_kind"),
        Index("idx_categories_kind", "kind"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    kind = Column(String(10), nullable=False)  # income or expense
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=True)
    icon = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


categories_table = Category.__table__
