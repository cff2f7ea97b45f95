import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from dealership import models
from dealership.repositories.base import translate_db_errors
from dealership.schemas import SalesSaleRow, SaleDetail
from dealership.utils.formatting import join_text, safe_text, format_code, format_price

logger = logging.getLogger(__name__)


def _with_parties(db: Session):
    return db.query(models.Sale).options(
        joinedload(models.Sale.customer),
        joinedload(models.Sale.vehicle),
    )


def _vehicle_text(sale: models.Sale) -> str:
    v = sale.vehicle
    return join_text(v.brand, v.model, v.color, v.year) if v else ""


def _customer_name(sale: models.Sale) -> str:
    c = sale.customer
    return join_text(c.first_name, c.last_name) if c else ""


def find_all_sales_for_sales(db: Session) -> List[SalesSaleRow]:
    with translate_db_errors(db, "load sales"):
        rows = _with_parties(db).order_by(
            models.Sale.sale_date.desc(),
            models.Sale.id.desc(),
        ).all()

    return [
        SalesSaleRow(
            id=s.id,
            code=format_code(s.id),
            vehicle_text=safe_text(_vehicle_text(s)),
            customer_name=safe_text(_customer_name(s)),
            price_text=format_price(s.price),
            sale_date=s.sale_date,
        )
        for s in rows
    ]


def find_sale_detail_by_id(db: Session, sale_id: int) -> Optional[SaleDetail]:
    with translate_db_errors(db, "load the sale"):
        s = _with_parties(db).filter(models.Sale.id == sale_id).first()

    if not s:
        return None

    return SaleDetail(
        id=s.id,
        customer_name=_customer_name(s),
        vehicle_text=_vehicle_text(s),
        price=s.price,
        sale_date=s.sale_date,
        notes=s.notes,
    )


def create_sale_from_proposal(db: Session, proposal_id: int, sale_date: date, commit: bool = True) -> Optional[int]:
    """
    Copies customer, vehicle, seller, dealership, price and notes from the proposal.
    Returns None when the proposal does not exist. A second sale for the same
    proposal fails on the unique proposal_id.
    """
    with translate_db_errors(db, "register the sale", "This proposal has already been sold."):
        proposal = db.query(models.SaleProposal).filter(models.SaleProposal.id == proposal_id).first()
        if proposal is None:
            return None

        sale = models.Sale(
            proposal_id=proposal.id,
            customer_id=proposal.customer_id,
            vehicle_id=proposal.vehicle_id,
            seller_user_id=proposal.seller_user_id,
            dealership_id=proposal.dealership_id,
            price=proposal.price,
            sale_date=sale_date,
            notes=proposal.notes,
        )
        db.add(sale)
        db.flush()
        if commit:
            db.commit()

    logger.info("Sale %s registered for proposal %s", sale.id, proposal_id)
    return sale.id
