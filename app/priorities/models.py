from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class CategoryPriority(Base):
    __tablename__ = "category_priorities"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "category_id", "dashboard_id",
            name="uq_category_priority_user_category_dashboard"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    dashboard_id = Column(Integer, ForeignKey("dashboards.id", ondelete="CASCADE"), nullable=False)
    priority = Column(Integer, nullable=False)

    user = relationship("User")
    category = relationship("Category")
