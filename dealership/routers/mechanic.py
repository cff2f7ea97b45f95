from typing import List
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dealership import schemas
from dealership.database import get_db
from dealership.exceptions import NotFoundOrForbiddenError, GuardViolatedError
from dealership.models import RepairStatus
from dealership.oauth2 import require_mechanic_role
from dealership.repositories import repair_orders, repair_history, customers
from dealership.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mechanic", tags=["Mechanic API"])

REPAIR_NOT_FOUND = "Repair not found."

# ============================================================
# READS
# ============================================================

@router.get("/tasks", response_model=List[schemas.RepairTaskRow])
def list_my_tasks(db: Session = Depends(get_db), session: SessionContext = Depends(require_mechanic_role)):
    return repair_orders.find_tasks_by_mechanic_id(db, session.user_id)


@router.get("/history", response_model=List[schemas.RepairHistoryRow])
def list_my_history(db: Session = Depends(get_db), session: SessionContext = Depends(require_mechanic_role)):
    return repair_history.find_history_by_mechanic_id(db, session.user_id)


@router.get("/repairs/{repair_id}", response_model=schemas.RepairDetails)
def get_repair_details(repair_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_mechanic_role)):
    details = repair_orders.find_repair_details_by_id(db, repair_id)
    if not details:
        raise NotFoundOrForbiddenError(REPAIR_NOT_FOUND)
    return details


@router.get("/repairs/{repair_id}/customer", response_model=schemas.CustomerDetail)
def get_repair_customer(repair_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_mechanic_role)):
    customer_id = repair_orders.find_customer_id_for_repair(db, repair_id)
    customer = customers.find_customer_detail_by_id(db, customer_id) if customer_id else None
    if not customer:
        raise NotFoundOrForbiddenError("Customer not found.")
    return customer


# ============================================================
# STATUS CHANGES
# ============================================================

@router.post("/repairs/{repair_id}/start", response_model=schemas.RepairActionResult)
def start_repair(repair_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_mechanic_role)):
    if not repair_orders.start_repair(db, repair_id):
        logger.info("Mechanic %s could not start repair %s", session.user_id, repair_id)
        raise GuardViolatedError("The repair cannot be started (it is not in ASSIGNED).")
    return schemas.RepairActionResult(
        repair_id=repair_id, status=RepairStatus.IN_PROGRESS.value, message="Repair started."
    )


@router.post("/repairs/{repair_id}/finish", response_model=schemas.RepairActionResult)
def finish_repair(repair_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_mechanic_role)):
    if not repair_orders.finish_repair(db, repair_id):
        logger.info("Mechanic %s could not finish repair %s", session.user_id, repair_id)
        raise GuardViolatedError("The repair cannot be finished (it is not IN_PROGRESS).")
    return schemas.RepairActionResult(
        repair_id=repair_id, status=RepairStatus.FINISHED.value, message="Repair finished."
    )
