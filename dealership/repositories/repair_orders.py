"""
Repair order queries and commands for the boss and mechanic workflows.

Every command is a single UPDATE/INSERT committed on its own. Ownership and
status rules live in the WHERE clause, so a command that returns False cannot
tell the caller whether the repair does not exist, belongs to another boss,
or is in a status that does not allow the change.
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from dealership import models
from dealership.models import RepairStatus
from dealership.repositories.base import translate_db_errors, normalized
from dealership.schemas import RepairTaskRow, BossRepairEditDetails, RepairDetails
from dealership.utils import utcnow
from dealership.utils.formatting import normalize, trimmed, join_text

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = (RepairStatus.PENDING.value, RepairStatus.ASSIGNED.value)

STATUS_LABELS = {
    RepairStatus.ASSIGNED.value: "Assigned",
    RepairStatus.IN_PROGRESS.value: "In progress",
    RepairStatus.FINISHED.value: "Finished",
}


def is_editable(status: Optional[str]) -> bool:
    """A boss may edit a repair only while it is PENDING or ASSIGNED."""
    return normalize(status) in EDITABLE_STATUSES


def status_label(status: Optional[str]) -> str:
    if status is None:
        return "Unknown"
    return STATUS_LABELS.get(normalize(status), status)


# =================================================================================
# READS
# =================================================================================

def _task_rows(query) -> List[RepairTaskRow]:
    return [
        RepairTaskRow(repair_id=r.id, vehicle=join_text(r.brand, r.model), status=trimmed(r.status))
        for r in query.order_by(models.RepairOrder.id.asc()).all()
    ]


def _task_query(db: Session):
    return db.query(
        models.RepairOrder.id,
        models.Vehicle.brand,
        models.Vehicle.model,
        models.RepairOrder.status,
    ).join(models.Vehicle, models.Vehicle.id == models.RepairOrder.vehicle_id)


def find_tasks_by_mechanic_id(db: Session, mechanic_user_id: int) -> List[RepairTaskRow]:
    with translate_db_errors(db, "load mechanic tasks"):
        return _task_rows(
            _task_query(db).filter(models.RepairOrder.assigned_mechanic_id == mechanic_user_id)
        )


def find_repairs_by_boss_id(db: Session, boss_id: int) -> List[RepairTaskRow]:
    with translate_db_errors(db, "load boss repairs"):
        return _task_rows(
            _task_query(db).filter(models.RepairOrder.created_by_boss_id == boss_id)
        )


def find_boss_edit_details_by_id(db: Session, repair_id: int, boss_id: int) -> Optional[BossRepairEditDetails]:
    """Returns None when the repair does not exist or was created by another boss."""
    mechanic = aliased(models.User)
    with translate_db_errors(db, "load repair details"):
        row = db.query(
            models.RepairOrder.id,
            models.RepairOrder.status,
            models.RepairOrder.notes,
            models.RepairOrder.assigned_mechanic_id,
            models.Vehicle.brand,
            models.Vehicle.model,
            mechanic.full_name.label("mechanic_name"),
        ).join(
            models.Vehicle, models.Vehicle.id == models.RepairOrder.vehicle_id
        ).outerjoin(
            mechanic, mechanic.id == models.RepairOrder.assigned_mechanic_id
        ).filter(
            models.RepairOrder.id == repair_id,
            models.RepairOrder.created_by_boss_id == boss_id,
        ).first()

    if not row:
        return None

    return BossRepairEditDetails(
        repair_id=row.id,
        vehicle_text=join_text(row.brand, row.model),
        status=trimmed(row.status),
        notes=trimmed(row.notes),
        mechanic_id=row.assigned_mechanic_id,
        mechanic_name=trimmed(row.mechanic_name),
        editable=is_editable(row.status),
    )


def find_repair_details_by_id(db: Session, repair_id: int) -> Optional[RepairDetails]:
    with translate_db_errors(db, "load repair details"):
        row = db.query(
            models.RepairOrder.id,
            models.RepairOrder.status,
            models.RepairOrder.notes,
            models.Customer.id.label("customer_id"),
            models.Customer.first_name,
            models.Customer.last_name,
            models.Customer.dni,
            models.Customer.phone,
            models.Customer.email,
            models.Vehicle.brand,
            models.Vehicle.model,
        ).join(
            models.Vehicle, models.Vehicle.id == models.RepairOrder.vehicle_id
        ).join(
            models.Customer, models.Customer.id == models.RepairOrder.customer_id
        ).filter(models.RepairOrder.id == repair_id).first()

    if not row:
        return None

    status = normalize(row.status)
    return RepairDetails(
        repair_id=row.id,
        status=trimmed(row.status),
        status_label=status_label(row.status),
        notes=trimmed(row.notes),
        customer_id=row.customer_id,
        customer_name=join_text(row.first_name, row.last_name),
        customer_dni=trimmed(row.dni),
        customer_phone=trimmed(row.phone),
        customer_email=trimmed(row.email),
        vehicle_text=join_text(row.brand, row.model),
        can_start=status == RepairStatus.ASSIGNED.value,
        can_finish=status == RepairStatus.IN_PROGRESS.value,
    )


def find_customer_id_for_repair(db: Session, repair_id: int) -> Optional[int]:
    with translate_db_errors(db, "load repair customer"):
        row = db.query(models.RepairOrder.customer_id).filter(models.RepairOrder.id == repair_id).first()
    return row.customer_id if row else None


# =================================================================================
# COMMANDS
# =================================================================================

def create_repair_order(db: Session, vehicle_id: int, customer_id: int, boss_id: int, mechanic_id: int, notes: str) -> int:
    """
    Creates the repair directly in ASSIGNED: the boss picks the mechanic at creation time.
    Unknown vehicle/customer/mechanic ids surface as ConflictError.
    """
    repair = models.RepairOrder(
        vehicle_id=vehicle_id,
        customer_id=customer_id,
        created_by_boss_id=boss_id,
        assigned_mechanic_id=mechanic_id,
        status=RepairStatus.ASSIGNED.value,
        notes=notes,
    )
    with translate_db_errors(db, "create the repair", "Vehicle, customer or mechanic does not exist."):
        db.add(repair)
        db.commit()
        db.refresh(repair)

    logger.info("Repair %s created by boss %s for mechanic %s", repair.id, boss_id, mechanic_id)
    return repair.id


def _boss_editable(db: Session, repair_id: int, boss_id: int):
    return db.query(models.RepairOrder).filter(
        models.RepairOrder.id == repair_id,
        models.RepairOrder.created_by_boss_id == boss_id,
        normalized(models.RepairOrder.status).in_(EDITABLE_STATUSES),
    )


def assign_mechanic_and_update_notes(db: Session, repair_id: int, boss_id: int, mechanic_id: int, notes: str) -> bool:
    with translate_db_errors(db, "assign the mechanic", "Mechanic does not exist."):
        updated = _boss_editable(db, repair_id, boss_id).update({
            models.RepairOrder.assigned_mechanic_id: mechanic_id,
            models.RepairOrder.status: RepairStatus.ASSIGNED.value,
            models.RepairOrder.notes: notes,
        }, synchronize_session=False)
        db.commit()

    logger.info("Assign repair %s to mechanic %s by boss %s: %s rows", repair_id, mechanic_id, boss_id, updated)
    return updated > 0


def unassign_mechanic_and_update_notes(db: Session, repair_id: int, boss_id: int, notes: str) -> bool:
    with translate_db_errors(db, "unassign the mechanic"):
        updated = _boss_editable(db, repair_id, boss_id).update({
            models.RepairOrder.assigned_mechanic_id: None,
            models.RepairOrder.status: RepairStatus.PENDING.value,
            models.RepairOrder.notes: notes,
        }, synchronize_session=False)
        db.commit()

    logger.info("Unassign repair %s by boss %s: %s rows", repair_id, boss_id, updated)
    return updated > 0


def start_repair(db: Session, repair_id: int) -> bool:
    """ASSIGNED -> IN_PROGRESS. start_at is only set the first time."""
    now = utcnow()
    with translate_db_errors(db, "start the repair"):
        updated = db.query(models.RepairOrder).filter(
            models.RepairOrder.id == repair_id,
            normalized(models.RepairOrder.status) == RepairStatus.ASSIGNED.value,
        ).update({
            models.RepairOrder.status: RepairStatus.IN_PROGRESS.value,
            models.RepairOrder.start_at: func.coalesce(models.RepairOrder.start_at, now),
        }, synchronize_session=False)
        db.commit()

    logger.info("Start repair %s: %s rows", repair_id, updated)
    return updated > 0


def finish_repair(db: Session, repair_id: int) -> bool:
    """IN_PROGRESS -> FINISHED. end_at is always overwritten."""
    now = utcnow()
    with translate_db_errors(db, "finish the repair"):
        updated = db.query(models.RepairOrder).filter(
            models.RepairOrder.id == repair_id,
            normalized(models.RepairOrder.status) == RepairStatus.IN_PROGRESS.value,
        ).update({
            models.RepairOrder.status: RepairStatus.FINISHED.value,
            models.RepairOrder.end_at: now,
        }, synchronize_session=False)
        db.commit()

    logger.info("Finish repair %s: %s rows", repair_id, updated)
    return updated > 0
