import logging
from typing import List

from sqlalchemy.orm import Session

from dealership import models
from dealership.models import RepairStatus
from dealership.repositories.base import translate_db_errors, normalized
from dealership.schemas import RepairHistoryRow
from dealership.utils.formatting import join_text, format_day

logger = logging.getLogger(__name__)

COMPLETED_LABEL = "Completed"


def find_history_by_mechanic_id(db: Session, mechanic_user_id: int) -> List[RepairHistoryRow]:
    """Finished repairs of one mechanic, most recently finished first."""
    with translate_db_errors(db, "load repair history"):
        rows = db.query(
            models.RepairOrder.id,
            models.RepairOrder.end_at,
            models.Vehicle.brand,
            models.Vehicle.model,
            models.Vehicle.entry_date,
        ).join(
            models.Vehicle, models.Vehicle.id == models.RepairOrder.vehicle_id
        ).filter(
            models.RepairOrder.assigned_mechanic_id == mechanic_user_id,
            normalized(models.RepairOrder.status) == RepairStatus.FINISHED.value,
        ).order_by(
            models.RepairOrder.end_at.desc().nulls_last(),
            models.RepairOrder.id.desc(),
        ).all()

    return [
        RepairHistoryRow(
            repair_id=r.id,
            vehicle=join_text(r.brand, r.model, r.entry_date.year if r.entry_date else None),
            status=COMPLETED_LABEL,
            end_date=format_day(r.end_at),
        )
        for r in rows
    ]
