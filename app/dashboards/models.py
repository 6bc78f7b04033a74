from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.dashboards.catalog import AccessLevel, Role


class AccessLevelEntry(Base):
    __tablename__ = "access_levels"

    id = Column(Integer, primary_key=True, index=True)
    level = Column(Enum(AccessLevel, name="access_level_enum"), unique=True, nullable=False)


class RoleEntry(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Enum(Role, name="role_enum"), unique=True, nullable=False)


class Dashboard(Base):
    __tablename__ = "dashboards"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    owner = relationship("User")


class DashboardAccess(Base):
    __tablename__ = "dashboard_access"
    __table_args__ = (
        UniqueConstraint("user_id", "dashboard_id", name="uq_dashboard_access_user_dashboard"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    dashboard_id = Column(Integer, ForeignKey("dashboards.id", ondelete="CASCADE"), nullable=False)
    access_level_id = Column(Integer, ForeignKey("access_levels.id"), nullable=False)

    user = relationship("User")
    dashboard = relationship("Dashboard")
    access_level = relationship("AccessLevelEntry")


class DashboardRole(Base):
    __tablename__ = "dashboard_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "dashboard_id", name="uq_dashboard_role_user_dashboard"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    dashboard_id = Column(Integer, ForeignKey("dashboards.id", ondelete="CASCADE"), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)

    user = relationship("User")
    dashboard = relationship("Dashboard")
    role = relationship("RoleEntry")
