from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dealership import schemas
from dealership.database import get_db
from dealership.exceptions import NotFoundOrForbiddenError
from dealership.oauth2 import require_sales_role
from dealership.repositories import sales
from dealership.session import SessionContext

router = APIRouter(prefix="/api/v1/sales/sales", tags=["Sales: Sales"])


@router.get("/", response_model=List[schemas.SalesSaleRow])
def list_sales(db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    return sales.find_all_sales_for_sales(db)


@router.get("/{sale_id}", response_model=schemas.SaleDetail)
def get_sale(sale_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    sale = sales.find_sale_detail_by_id(db, sale_id)
    if not sale:
        raise NotFoundOrForbiddenError("Sale not found.")
    return sale
