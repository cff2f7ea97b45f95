from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dealership import schemas
from dealership.database import get_db
from dealership.exceptions import NotFoundOrForbiddenError
from dealership.oauth2 import require_sales_role
from dealership.repositories import vehicles
from dealership.session import SessionContext

router = APIRouter(prefix="/api/v1/sales/vehicles", tags=["Sales: Vehicles"])


@router.get("/", response_model=List[schemas.SalesVehicleRow])
def list_vehicles(db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    return vehicles.find_all_vehicles_for_sales(db)


@router.get("/lookup", response_model=List[schemas.IdName])
def vehicle_lookup(db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    return vehicles.find_all_vehicles_for_combo(db)


@router.get("/{vehicle_id}", response_model=schemas.VehicleDetail)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    vehicle = vehicles.find_vehicle_detail_by_id(db, vehicle_id)
    if not vehicle:
        raise NotFoundOrForbiddenError("Vehicle not found.")
    return vehicle
