from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dealership import schemas
from dealership.database import get_db
from dealership.exceptions import NotFoundOrForbiddenError, GuardViolatedError, DomainValidationError
from dealership.models import ProposalStatus
from dealership.oauth2 import require_sales_role
from dealership.repositories import proposals, sales
from dealership.session import SessionContext
from dealership.utils.formatting import format_code, normalize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sales/proposals", tags=["Sales: Proposals"])

PROPOSAL_NOT_FOUND = "Proposal not found."

# ============================================================
# READS
# ============================================================

@router.get("/", response_model=List[schemas.SalesProposalRow])
def list_proposals(db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    return proposals.find_all_proposals_for_sales(db)


@router.get("/{proposal_id}", response_model=schemas.ProposalDetail)
def get_proposal(proposal_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    proposal = proposals.find_proposal_detail_by_id(db, proposal_id)
    if not proposal:
        raise NotFoundOrForbiddenError(PROPOSAL_NOT_FOUND)
    return proposal


# ============================================================
# COMMANDS
# ============================================================

@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.ProposalCreated)
def create_proposal(data: schemas.ProposalCreate, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    new_id = proposals.insert_proposal(
        db,
        customer_id=data.customer_id,
        vehicle_id=data.vehicle_id,
        seller_user_id=session.user_id,
        dealership_id=session.dealership_id,
        price=data.price,
        notes=data.notes,
    )
    return schemas.ProposalCreated(id=new_id, code=format_code(new_id), status=ProposalStatus.ACTIVE.value)


@router.put("/{proposal_id}", response_model=schemas.ProposalDetail)
def update_proposal(proposal_id: int, data: schemas.ProposalUpdate, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    if normalize(data.status) == ProposalStatus.ACCEPTED.value:
        raise DomainValidationError("Accept the proposal to register the sale.")

    if not proposals.update_proposal(db, proposal_id, data.price, data.notes, data.status):
        raise GuardViolatedError("The proposal could not be updated. It may not exist or be already accepted.")
    return proposals.find_proposal_detail_by_id(db, proposal_id)


@router.delete("/{proposal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_proposal(proposal_id: int, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    if not proposals.delete_proposal_by_id(db, proposal_id):
        raise GuardViolatedError("The proposal could not be deleted. It may not exist or have a sale registered.")


@router.post("/{proposal_id}/accept", status_code=status.HTTP_201_CREATED, response_model=schemas.SaleDetail)
def accept_proposal(proposal_id: int, data: Optional[schemas.ProposalAccept] = None, db: Session = Depends(get_db), session: SessionContext = Depends(require_sales_role)):
    sale_date = data.sale_date if data and data.sale_date else date.today()

    sale_id = proposals.accept_proposal(db, proposal_id, sale_date)
    if sale_id is None:
        raise NotFoundOrForbiddenError(PROPOSAL_NOT_FOUND)

    logger.info("Seller %s accepted proposal %s", session.user_id, proposal_id)
    return sales.find_sale_detail_by_id(db, sale_id)
