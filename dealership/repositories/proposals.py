"""
Sale proposals and their conversion into sales.

A proposal becomes read-only once ACCEPTED. Acceptance is the only
multi-statement transaction in the application: the Sale insert and the
status change commit together or not at all.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from dealership import models
from dealership.models import ProposalStatus
from dealership.repositories.base import translate_db_errors, normalized
from dealership.repositories.sales import create_sale_from_proposal
from dealership.schemas import SalesProposalRow, ProposalDetail
from dealership.utils.formatting import join_text, safe_text, format_code, format_price, normalize, trimmed

logger = logging.getLogger(__name__)


def _vehicle_text(vehicle: Optional[models.Vehicle]) -> str:
    if vehicle is None:
        return ""
    return join_text(vehicle.brand, vehicle.model, vehicle.color, vehicle.year)


def _customer_name(customer: Optional[models.Customer]) -> str:
    if customer is None:
        return ""
    return join_text(customer.first_name, customer.last_name)


def _with_parties(db: Session):
    return db.query(models.SaleProposal).options(
        joinedload(models.SaleProposal.customer),
        joinedload(models.SaleProposal.vehicle),
    )


# =================================================================================
# READS
# =================================================================================

def find_all_proposals_for_sales(db: Session) -> List[SalesProposalRow]:
    with translate_db_errors(db, "load proposals"):
        rows = _with_parties(db).order_by(models.SaleProposal.id.desc()).all()

    return [
        SalesProposalRow(
            id=p.id,
            code=format_code(p.id),
            vehicle_text=safe_text(_vehicle_text(p.vehicle)),
            customer_name=safe_text(_customer_name(p.customer)),
            price_text=format_price(p.price),
            status=safe_text(trimmed(p.status)),
        )
        for p in rows
    ]


def find_proposal_detail_by_id(db: Session, proposal_id: int) -> Optional[ProposalDetail]:
    with translate_db_errors(db, "load the proposal"):
        p = _with_parties(db).filter(models.SaleProposal.id == proposal_id).first()

    if not p:
        return None

    return ProposalDetail(
        id=p.id,
        customer_id=p.customer_id,
        vehicle_id=p.vehicle_id,
        customer_name=_customer_name(p.customer),
        vehicle_text=_vehicle_text(p.vehicle),
        price=p.price,
        notes=p.notes,
        status=trimmed(p.status),
        accepted=normalize(p.status) == ProposalStatus.ACCEPTED.value,
    )


def is_proposal_already_sold(db: Session, proposal_id: int) -> bool:
    with translate_db_errors(db, "check the proposal"):
        return db.query(models.Sale.id).filter(models.Sale.proposal_id == proposal_id).first() is not None


# =================================================================================
# COMMANDS
# =================================================================================

def insert_proposal(db: Session, customer_id: int, vehicle_id: int, seller_user_id: int,
                    dealership_id: int, price: Decimal, notes: Optional[str]) -> int:
    proposal = models.SaleProposal(
        customer_id=customer_id,
        vehicle_id=vehicle_id,
        seller_user_id=seller_user_id,
        dealership_id=dealership_id,
        price=price,
        notes=(notes or "").strip() or None,
        status=ProposalStatus.ACTIVE.value,
    )
    with translate_db_errors(db, "create the proposal", "Customer or vehicle does not exist."):
        db.add(proposal)
        db.commit()
        db.refresh(proposal)

    logger.info("Proposal %s created by seller %s", proposal.id, seller_user_id)
    return proposal.id


def update_proposal(db: Session, proposal_id: int, price: Decimal, notes: Optional[str],
                    status: Optional[str] = None) -> bool:
    """Price/notes/status of a proposal that has not been accepted yet."""
    values = {
        models.SaleProposal.price: price,
        models.SaleProposal.notes: (notes or "").strip() or None,
    }
    if normalize(status):
        values[models.SaleProposal.status] = normalize(status)

    with translate_db_errors(db, "update the proposal"):
        updated = db.query(models.SaleProposal).filter(
            models.SaleProposal.id == proposal_id,
            normalized(models.SaleProposal.status) != ProposalStatus.ACCEPTED.value,
        ).update(values, synchronize_session=False)
        db.commit()

    logger.info("Proposal %s updated: %s rows", proposal_id, updated)
    return updated > 0


def set_proposal_status(db: Session, proposal_id: int, status: str, commit: bool = True) -> bool:
    with translate_db_errors(db, "change the proposal status"):
        updated = db.query(models.SaleProposal).filter(
            models.SaleProposal.id == proposal_id
        ).update({models.SaleProposal.status: normalize(status)}, synchronize_session=False)
        if commit:
            db.commit()
    return updated > 0


def delete_proposal_by_id(db: Session, proposal_id: int) -> bool:
    """Refuses (False) when a sale already references the proposal."""
    if is_proposal_already_sold(db, proposal_id):
        logger.info("Proposal %s not deleted: already sold", proposal_id)
        return False

    with translate_db_errors(db, "delete the proposal", "This proposal has already been sold."):
        deleted = db.query(models.SaleProposal).filter(
            models.SaleProposal.id == proposal_id
        ).delete(synchronize_session=False)
        db.commit()

    logger.info("Proposal %s deleted: %s rows", proposal_id, deleted)
    return deleted > 0


def accept_proposal(db: Session, proposal_id: int, sale_date: date) -> Optional[int]:
    """
    Registers the sale of a proposal and marks it ACCEPTED in one transaction.

    Returns the new sale id, or None when the proposal does not exist.
    A proposal that already has a sale raises ConflictError and nothing changes.
    """
    with translate_db_errors(db, "accept the proposal", "This proposal has already been sold."):
        sale_id = create_sale_from_proposal(db, proposal_id, sale_date, commit=False)
        if sale_id is None:
            db.rollback()
            return None
        set_proposal_status(db, proposal_id, ProposalStatus.ACCEPTED.value, commit=False)
        db.commit()

    logger.info("Proposal %s accepted as sale %s", proposal_id, sale_id)
    return sale_id
