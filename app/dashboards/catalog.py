import enum
from decimal import Decimal

from loguru import logger
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import InvalidArgument


class AccessLevel(str, enum.Enum):
    """Dashboard access levels, declared from weakest to strongest."""

    VIEWER = "VIEWER"
    EDITOR = "EDITOR"
    OWNER = "OWNER"

    @property
    def rank(self) -> int:
        return ACCESS_LEVEL_ORDER.index(self)

    def covers(self, required: "AccessLevel") -> bool:
        return self.rank >= required.rank


ACCESS_LEVEL_ORDER = list(AccessLevel)


class Role(str, enum.Enum):
    """Demographic role of a member; only used to weight category priorities."""

    ENTREPRENEUR = "ENTREPRENEUR"
    EMPLOYEE = "EMPLOYEE"
    RETIREE = "RETIREE"
    HOUSEMAKER = "HOUSEMAKER"
    STUDENT = "STUDENT"
    CHILD = "CHILD"
    NONE = "NONE"

    @property
    def weight(self) -> Decimal:
        return Decimal(str(settings.ROLE_WEIGHTS[self.value]))


def parse_access_level(value) -> AccessLevel:
    if isinstance(value, AccessLevel):
        return value
    try:
        return AccessLevel(str(value).strip().upper())
    except ValueError:
        raise InvalidArgument(f"Invalid access level value: {value}")


def parse_role(value) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        raise InvalidArgument(f"Invalid role value: {value}")


def seed_catalog(db: Session):
    """Make sure every access level and role has its catalog row."""
    from app.dashboards.models import AccessLevelEntry, RoleEntry

    existing_levels = {row.level for row in db.query(AccessLevelEntry).all()}
    for level in AccessLevel:
        if level not in existing_levels:
            db.add(AccessLevelEntry(level=level))
            logger.info(f"Seeded access level {level.value}")

    existing_roles = {row.name for row in db.query(RoleEntry).all()}
    for role in Role:
        if role not in existing_roles:
            db.add(RoleEntry(name=role))
            logger.info(f"Seeded role {role.value}")

    db.commit()
