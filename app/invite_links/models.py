from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from app.database import Base


class InviteLink(Base):
    __tablename__ = "invite_links"
    __table_args__ = (
        # at most one active link per dashboard
        Index(
            "uq_invite_links_active_dashboard",
            "dashboard_id",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    dashboard_id = Column(
        Integer,
        ForeignKey("dashboards.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    expiry_date = Column(DateTime, nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    dashboard = relationship("Dashboard")
