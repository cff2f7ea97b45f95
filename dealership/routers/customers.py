from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dealership import schemas
from dealership.database import get_db
from dealership.exceptions import NotFoundOrForbiddenError
from dealership.oauth2 import require_sales_role
from dealership.repositories import customers
from dealership.session import SessionContext

router = APIRouter(prefix="/api/v1/sales/customers", tags=["Sales: Customers"])

CUSTOMER_NOT_FOUND = "Customer not found."


@router.get("/", response_model=List[schemas.SalesCustomerRow])
def list_customers(db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    return customers.find_all_customers_for_sales(db)


@router.get("/lookup", response_model=List[schemas.IdName])
def customer_lookup(db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    return customers.find_all_customers_for_combo(db)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.CustomerCreated)
def create_customer(data: schemas.CustomerCreate, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    new_id = customers.insert_customer(
        db,
        dni=data.dni,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        email=data.email,
    )
    return schemas.CustomerCreated(id=new_id)


@router.get("/{customer_id}", response_model=schemas.CustomerDetail)
def get_customer(customer_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    customer = customers.find_customer_detail_by_id(db, customer_id)
    if not customer:
        raise NotFoundOrForbiddenError(CUSTOMER_NOT_FOUND)
    return customer


@router.put("/{customer_id}", response_model=schemas.CustomerDetail)
def update_customer(customer_id: int, data: schemas.CustomerUpdate, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    updated = customers.update_customer(
        db,
        customer_id,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        email=data.email,
    )
    if not updated:
        raise NotFoundOrForbiddenError(CUSTOMER_NOT_FOUND)
    return customers.find_customer_detail_by_id(db, customer_id)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    if not customers.delete_customer_by_id(db, customer_id):
        raise NotFoundOrForbiddenError(CUSTOMER_NOT_FOUND)
