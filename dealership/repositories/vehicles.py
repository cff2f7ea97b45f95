from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from dealership import models
from dealership.repositories.base import translate_db_errors
from dealership.schemas import IdName, SalesVehicleRow, VehicleDetail
from dealership.utils.formatting import join_text, safe_text


def find_all_vehicles_for_combo(db: Session) -> List[IdName]:
    with translate_db_errors(db, "load vehicles"):
        rows = db.query(models.Vehicle.id, models.Vehicle.brand, models.Vehicle.model).order_by(
            models.Vehicle.id.asc()
        ).all()
    return [IdName(id=r.id, name=join_text(r.brand, r.model)) for r in rows]


def find_all_vehicles_for_sales(db: Session) -> List[SalesVehicleRow]:
    with translate_db_errors(db, "load vehicles"):
        rows = db.query(models.Vehicle).order_by(
            models.Vehicle.entry_date.desc().nulls_last(),
            models.Vehicle.id.desc(),
        ).all()

    return [
        SalesVehicleRow(
            id=v.id,
            plate=v.plate,
            vehicle=safe_text(join_text(v.brand, v.model, v.color, v.year)),
            date_added=v.entry_date,
        )
        for v in rows
    ]


def find_vehicle_detail_by_id(db: Session, vehicle_id: int) -> Optional[VehicleDetail]:
    with translate_db_errors(db, "load the vehicle"):
        v = db.query(models.Vehicle).options(
            joinedload(models.Vehicle.category)
        ).filter(models.Vehicle.id == vehicle_id).first()

    if not v:
        return None

    detail = VehicleDetail.model_validate(v)
    detail.type = v.category.name if v.category else None
    return detail
