import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from dealership import models
from dealership.repositories.base import translate_db_errors
from dealership.schemas import IdName, SalesCustomerRow, CustomerDetail
from dealership.utils.formatting import join_text, safe_text, trimmed

logger = logging.getLogger(__name__)


def find_all_customers_for_combo(db: Session) -> List[IdName]:
    with translate_db_errors(db, "load customers"):
        rows = db.query(models.Customer).filter(
            models.Customer.active == True
        ).order_by(models.Customer.id.asc()).all()

    return [
        IdName(id=c.id, name=f"{join_text(c.first_name, c.last_name)} ({trimmed(c.dni)})")
        for c in rows
    ]


def find_all_customers_for_sales(db: Session) -> List[SalesCustomerRow]:
    with translate_db_errors(db, "load customers"):
        rows = db.query(models.Customer).filter(
            models.Customer.active == True
        ).order_by(
            models.Customer.last_name.asc(),
            models.Customer.first_name.asc(),
            models.Customer.id.asc(),
        ).all()

    return [
        SalesCustomerRow(
            id=c.id,
            full_name=safe_text(join_text(c.first_name, c.last_name)),
            email=safe_text(c.email),
            phone=safe_text(c.phone),
        )
        for c in rows
    ]


def find_customer_detail_by_id(db: Session, customer_id: int) -> Optional[CustomerDetail]:
    with translate_db_errors(db, "load the customer"):
        c = db.query(models.Customer).filter(models.Customer.id == customer_id).first()

    if not c:
        return None

    return CustomerDetail(
        id=c.id,
        dni=trimmed(c.dni),
        first_name=trimmed(c.first_name),
        last_name=trimmed(c.last_name),
        full_name=join_text(c.first_name, c.last_name),
        phone=trimmed(c.phone),
        email=trimmed(c.email),
        active=bool(c.active),
    )


def insert_customer(db: Session, dni: str, first_name: str, last_name: str, phone: str, email: str) -> int:
    customer = models.Customer(
        dni=dni.strip().upper(),
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        email=email,
        active=True,
    )
    with translate_db_errors(db, "create the customer", "A customer with this DNI already exists."):
        db.add(customer)
        db.commit()
        db.refresh(customer)

    logger.info("Customer %s created", customer.id)
    return customer.id


def update_customer(db: Session, customer_id: int, first_name: str, last_name: str, phone: str, email: str) -> bool:
    with translate_db_errors(db, "update the customer"):
        updated = db.query(models.Customer).filter(
            models.Customer.id == customer_id
        ).update({
            models.Customer.first_name: first_name,
            models.Customer.last_name: last_name,
            models.Customer.phone: phone,
            models.Customer.email: email,
        }, synchronize_session=False)
        db.commit()

    logger.info("Customer %s updated: %s rows", customer_id, updated)
    return updated > 0


def delete_customer_by_id(db: Session, customer_id: int) -> bool:
    """Soft delete: the row stays, flagged inactive."""
    with translate_db_errors(db, "delete the customer"):
        updated = db.query(models.Customer).filter(
            models.Customer.id == customer_id
        ).update({models.Customer.active: False}, synchronize_session=False)
        db.commit()

    logger.info("Customer %s deactivated: %s rows", customer_id, updated)
    return updated > 0
