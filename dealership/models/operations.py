# Repair orders, Sale proposals, Sales

import enum

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from dealership.database import Base

class RepairStatus(str, enum.Enum):
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"

class ProposalStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    ACCEPTED = "ACCEPTED"

class RepairOrder(Base):
    __tablename__ = "repair_order"
    id = Column(Integer, primary_key=True, index=True)

    vehicle_id = Column(Integer, ForeignKey("vehicle.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customer.id"), nullable=False, index=True)
    created_by_boss_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    assigned_mechanic_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)

    # Plain text, compared with UPPER(TRIM(status))
    status = Column(String(20), nullable=False, default=RepairStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)
    start_at = Column(DateTime, nullable=True)
    end_at = Column(DateTime, nullable=True, index=True)

    vehicle = relationship("Vehicle")
    customer = relationship("Customer")
    boss = relationship("User", foreign_keys=[created_by_boss_id])
    mechanic = relationship("User", foreign_keys=[assigned_mechanic_id])

class SaleProposal(Base):
    __tablename__ = "sale_proposal"
    id = Column(Integer, primary_key=True)

    customer_id = Column(Integer, ForeignKey("customer.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicle.id"), nullable=False, index=True)
    seller_user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    dealership_id = Column(Integer, ForeignKey("dealership.id"), nullable=False, index=True)

    price = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=ProposalStatus.ACTIVE.value, index=True)

    customer = relationship("Customer")
    vehicle = relationship("Vehicle")
    sale = relationship("Sale", back_populates="proposal", uselist=False)

class Sale(Base):
    __tablename__ = "sale"
    id = Column(Integer, primary_key=True, index=True)

    # At most one sale per proposal
    proposal_id = Column(Integer, ForeignKey("sale_proposal.id"), nullable=False, unique=True, index=True)
    customer_id = Column(Integer, ForeignKey("customer.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicle.id"), nullable=False, index=True)
    seller_user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    dealership_id = Column(Integer, ForeignKey("dealership.id"), nullable=False, index=True)

    price = Column(Numeric(12, 2), nullable=False)
    sale_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    proposal = relationship("SaleProposal", back_populates="sale")
    customer = relationship("Customer")
    vehicle = relationship("Vehicle")
