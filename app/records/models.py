import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Table
from sqlalchemy.orm import relationship

from app.database import Base


class RecordType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


record_tags = Table(
    "financial_record_tags",
    Base.metadata,
    Column("record_id", Integer, ForeignKey("financial_records.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class FinancialRecord(Base):
    __tablename__ = "financial_records"

    id = Column(Integer, primary_key=True, index=True)
    dashboard_id = Column(
        Integer,
        ForeignKey("dashboards.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True
    )

    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(Enum(RecordType, name="record_type_enum"), nullable=False, default=RecordType.INCOME)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)
    description = Column(String(500), nullable=True)

    category = relationship("Category")
    user = relationship("User")
    tags = relationship("Tag", secondary=record_tags)
