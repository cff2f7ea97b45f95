"""
User lookups: login and the boss' view of the mechanics of their dealership.

Boss scoping is a self-join on the boss row: a mechanic is visible only when
mechanic.dealership_id = boss.dealership_id. An unknown boss, an unknown
mechanic and a mechanic from another dealership all give the same empty result.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, aliased, joinedload

from dealership import models
from dealership.repositories.base import translate_db_errors, normalized
from dealership.schemas import AuthUser, IdName, MechanicSkillRow
from dealership.security import verify_password
from dealership.session import MECHANIC
from dealership.utils.formatting import trimmed

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> Optional[AuthUser]:
    if not username or not password:
        return None

    with translate_db_errors(db, "authenticate"):
        user = db.query(models.User).options(
            joinedload(models.User.role)
        ).filter(
            models.User.username == username.strip(),
            models.User.is_active == True,
        ).first()

    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for username=%s", username)
        return None

    return AuthUser(
        id=user.id,
        dealership_id=user.dealership_id,
        role_name=user.role.name if user.role else "",
        full_name=trimmed(user.full_name),
    )


def _mechanic_role_ids():
    return select(models.Role.id).where(normalized(models.Role.name) == MECHANIC)


def find_active_mechanics_for_combo(db: Session) -> List[IdName]:
    with translate_db_errors(db, "load mechanics"):
        rows = db.query(models.User.id, models.User.full_name).filter(
            models.User.is_active == True,
            models.User.role_id.in_(_mechanic_role_ids()),
        ).order_by(models.User.full_name.asc(), models.User.id.asc()).all()

    return [IdName(id=r.id, name=trimmed(r.full_name) or f"Mechanic #{r.id}") for r in rows]


def _mechanics_of_boss_dealership(db: Session, boss_id: int, *columns):
    boss = aliased(models.User)
    return db.query(*columns).join(
        boss, boss.id == boss_id
    ).filter(
        models.User.dealership_id == boss.dealership_id,
        models.User.role_id.in_(_mechanic_role_ids()),
    )


def find_mechanics_with_skills_for_boss_dealership(db: Session, boss_id: int) -> List[MechanicSkillRow]:
    with translate_db_errors(db, "load mechanics"):
        rows = _mechanics_of_boss_dealership(
            db, boss_id,
            models.User.id, models.User.full_name, models.User.skills, models.User.is_active,
        ).order_by(models.User.full_name.asc(), models.User.id.asc()).all()

    return [
        MechanicSkillRow(
            id=r.id,
            full_name=trimmed(r.full_name),
            skills=trimmed(r.skills),
            status="Active" if r.is_active else "Inactive",
        )
        for r in rows
    ]


def find_mechanic_skills_for_boss_dealership(db: Session, boss_id: int, mechanic_id: int) -> Optional[str]:
    """'' when the mechanic has no skills yet, None when not visible to this boss."""
    with translate_db_errors(db, "load mechanic skills"):
        row = _mechanics_of_boss_dealership(
            db, boss_id, models.User.skills
        ).filter(models.User.id == mechanic_id).first()

    if row is None:
        return None
    return row.skills or ""


def update_mechanic_skills_for_boss_dealership(db: Session, boss_id: int, mechanic_id: int, skills: str) -> bool:
    boss_dealership = select(models.User.dealership_id).where(
        models.User.id == boss_id
    ).scalar_subquery()

    with translate_db_errors(db, "update mechanic skills"):
        updated = db.query(models.User).filter(
            models.User.id == mechanic_id,
            models.User.role_id.in_(_mechanic_role_ids()),
            models.User.dealership_id == boss_dealership,
        ).update({models.User.skills: skills}, synchronize_session=False)
        db.commit()

    logger.info("Skills of mechanic %s updated by boss %s: %s rows", mechanic_id, boss_id, updated)
    return updated > 0
