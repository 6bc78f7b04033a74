"""
Weighting of category priorities.

Each member's priority on a category is weighted by half their role weight
and half their share of the dashboard's income. The dashboard-wide score is
the weighted average of all members' priorities, rounded half-up to two
decimals only at the end.
"""
from decimal import Decimal, ROUND_HALF_UP

from loguru import logger
from sqlalchemy.orm import Session

from app.dashboards import access
from app.dashboards.catalog import AccessLevel, Role
from app.priorities.models import CategoryPriority
from app.records import service as record_service

ROLE_SHARE = Decimal("0.5")
INCOME_SHARE = Decimal("0.5")
SCORE_QUANTUM = Decimal("0.01")


def role_weight(role: Role) -> Decimal:
    return role.weight


def income_weight(user_income: Decimal, total_income: Decimal) -> Decimal:
    if not total_income:
        return Decimal(0)
    return Decimal(user_income) / Decimal(total_income)


def combined_weight(role_w: Decimal, income_w: Decimal) -> Decimal:
    return ROLE_SHARE * role_w + INCOME_SHARE * income_w


def calculate_category_priority(db: Session, category_id: int, dashboard_id: int, user_id: int) -> Decimal:
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)

    priorities = (
        db.query(CategoryPriority)
        .filter(
            CategoryPriority.category_id == category_id,
            CategoryPriority.dashboard_id == dashboard_id,
        )
        .order_by(CategoryPriority.id)
        .all()
    )

    total_income = record_service.sum_income_by_dashboard(db, dashboard_id)
    total_priority = Decimal(0)
    total_weight = Decimal(0)

    for entry in priorities:
        # a member without a role on the dashboard aborts the calculation
        role = access.get_role(db, entry.user_id, dashboard_id)
        user_income = record_service.sum_income_by_user_and_dashboard(db, entry.user_id, dashboard_id)

        weight = combined_weight(role_weight(role), income_weight(user_income, total_income))
        logger.debug(
            f"Priority {entry.priority} of user {entry.user_id} weighted {weight} "
            f"(role {role.value}, income {user_income}/{total_income})"
        )

        total_priority += Decimal(entry.priority) * weight
        total_weight += weight

    if total_weight == 0:
        logger.info(f"No weighted priorities for category {category_id} on dashboard {dashboard_id}")
        return Decimal("0.00")

    result = (total_priority / total_weight).quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP)
    logger.info(f"Calculated priority {result} for category {category_id} on dashboard {dashboard_id}")
    return result
