from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dealership import schemas
from dealership.database import get_db
from dealership.exceptions import NotFoundOrForbiddenError, GuardViolatedError
from dealership.models import RepairStatus
from dealership.oauth2 import require_boss_role
from dealership.repositories import repair_orders, users, vehicles, customers
from dealership.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/boss", tags=["Chief Mechanic API"])

# One message for "does not exist", "not yours" and "not editable"
REPAIR_NOT_FOUND = "Repair not found."
REPAIR_NOT_EDITABLE = "The repair could not be updated. It may not exist, belong to another boss, or no longer be editable."
MECHANIC_NOT_FOUND = "Mechanic not found."

# ============================================================
# REPAIRS
# ============================================================

@router.get("/repairs", response_model=List[schemas.RepairTaskRow])
def list_my_repairs(db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    return repair_orders.find_repairs_by_boss_id(db, session.user_id)


@router.post("/repairs", status_code=status.HTTP_201_CREATED, response_model=schemas.RepairCreated)
def create_repair(data: schemas.RepairCreate, db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    repair_id = repair_orders.create_repair_order(
        db,
        vehicle_id=data.vehicle_id,
        customer_id=data.customer_id,
        boss_id=session.user_id,
        mechanic_id=data.mechanic_id,
        notes=data.notes,
    )
    return schemas.RepairCreated(repair_id=repair_id, status=RepairStatus.ASSIGNED.value)


@router.get("/repairs/{repair_id}", response_model=schemas.BossRepairEditDetails)
def get_repair_for_edit(repair_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    details = repair_orders.find_boss_edit_details_by_id(db, repair_id, session.user_id)
    if not details:
        raise NotFoundOrForbiddenError(REPAIR_NOT_FOUND)
    return details


@router.put("/repairs/{repair_id}/assign", response_model=schemas.RepairActionResult)
def assign_mechanic(repair_id: int, data: schemas.RepairAssign, db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    updated = repair_orders.assign_mechanic_and_update_notes(
        db, repair_id, session.user_id, data.mechanic_id, data.notes.strip()
    )
    if not updated:
        raise GuardViolatedError(REPAIR_NOT_EDITABLE)
    return schemas.RepairActionResult(
        repair_id=repair_id, status=RepairStatus.ASSIGNED.value, message="Mechanic assigned."
    )


@router.put("/repairs/{repair_id}/unassign", response_model=schemas.RepairActionResult)
def unassign_mechanic(repair_id: int, data: schemas.RepairNotes, db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    updated = repair_orders.unassign_mechanic_and_update_notes(
        db, repair_id, session.user_id, data.notes.strip()
    )
    if not updated:
        raise GuardViolatedError(REPAIR_NOT_EDITABLE)
    return schemas.RepairActionResult(
        repair_id=repair_id, status=RepairStatus.PENDING.value, message="Mechanic unassigned."
    )


# ============================================================
# MECHANICS OF MY DEALERSHIP
# ============================================================

@router.get("/mechanics", response_model=List[schemas.MechanicSkillRow])
def list_mechanics(db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    return users.find_mechanics_with_skills_for_boss_dealership(db, session.user_id)


@router.get("/mechanics/active", response_model=List[schemas.IdName])
def list_active_mechanics(db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    return users.find_active_mechanics_for_combo(db)


@router.get("/mechanics/{mechanic_id}/skills", response_model=schemas.MechanicSkillsOut)
def get_mechanic_skills(mechanic_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    skills = users.find_mechanic_skills_for_boss_dealership(db, session.user_id, mechanic_id)
    if skills is None:
        raise NotFoundOrForbiddenError(MECHANIC_NOT_FOUND)
    return schemas.MechanicSkillsOut(mechanic_id=mechanic_id, skills=skills)


@router.put("/mechanics/{mechanic_id}/skills", response_model=schemas.MechanicSkillsOut)
def update_mechanic_skills(mechanic_id: int, data: schemas.MechanicSkillsUpdate, db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    skills = data.skills.strip()
    if not users.update_mechanic_skills_for_boss_dealership(db, session.user_id, mechanic_id, skills):
        raise GuardViolatedError("The skills could not be updated.")
    return schemas.MechanicSkillsOut(mechanic_id=mechanic_id, skills=skills)


# ============================================================
# LOOKUPS (create repair form)
# ============================================================

@router.get("/lookups/vehicles", response_model=List[schemas.IdName])
def vehicle_lookup(db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    return vehicles.find_all_vehicles_for_combo(db)


@router.get("/lookups/customers", response_model=List[schemas.IdName])
def customer_lookup(db: Session = Depends(get_db), session: SessionContext = Depends(require_boss_role)):
    return customers.find_all_customers_for_combo(db)
