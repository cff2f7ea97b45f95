# Customers, Vehicles, Proposals, Sales

from typing import Optional
from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from dealership.utils.formatting import split_full_name

# --- CUSTOMERS ---
class SalesCustomerRow(BaseModel):
    id: int
    full_name: str
    email: str
    phone: str

class CustomerDetail(BaseModel):
    id: int
    dni: str
    first_name: str
    last_name: str
    full_name: str
    phone: str
    email: str
    active: bool

class CustomerUpdate(BaseModel):
    full_name: str
    phone: str
    email: str

    @field_validator("full_name", "phone", "email")
    @classmethod
    def required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please fill in all fields.")
        return v

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str) -> str:
        if "@" not in v or "." not in v:
            raise ValueError("Please enter a valid email address.")
        return v

    @property
    def first_name(self) -> str:
        return split_full_name(self.full_name)[0]

    @property
    def last_name(self) -> str:
        return split_full_name(self.full_name)[1]

class CustomerCreate(CustomerUpdate):
    dni: str

    @field_validator("dni")
    @classmethod
    def dni_shape(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("Please fill in all fields.")
        if len(v) < 8:
            raise ValueError("Please enter a valid DNI.")
        return v

class CustomerCreated(BaseModel):
    id: int

# --- VEHICLES ---
class SalesVehicleRow(BaseModel):
    id: int
    plate: Optional[str] = None
    vehicle: str
    date_added: Optional[date] = None

class VehicleDetail(BaseModel):
    id: int
    plate: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    mileage: Optional[int] = None
    notes: Optional[str] = None
    type: Optional[str] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    doors: Optional[int] = None
    entry_date: Optional[date] = None
    class Config: from_attributes = True

# --- PROPOSALS ---
class SalesProposalRow(BaseModel):
    id: int
    code: str
    vehicle_text: str
    customer_name: str
    price_text: str
    status: str

class ProposalDetail(BaseModel):
    id: int
    customer_id: int
    vehicle_id: int
    customer_name: str
    vehicle_text: str
    price: Optional[Decimal] = None
    notes: Optional[str] = None
    status: str
    accepted: bool

class ProposalPrice(BaseModel):
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    notes: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def accept_decimal_comma(cls, v):
        # "15000,50" is accepted the same as "15000.50"
        if isinstance(v, str):
            return v.strip().replace(",", ".")
        return v

class ProposalCreate(ProposalPrice):
    customer_id: int = Field(..., gt=0)
    vehicle_id: int = Field(..., gt=0)

class ProposalUpdate(ProposalPrice):
    status: Optional[str] = None

class ProposalCreated(BaseModel):
    id: int
    code: str
    status: str

class ProposalAccept(BaseModel):
    sale_date: Optional[date] = None

# --- SALES ---
class SalesSaleRow(BaseModel):
    id: int
    code: str
    vehicle_text: str
    customer_name: str
    price_text: str
    sale_date: Optional[date] = None

class SaleDetail(BaseModel):
    id: int
    customer_name: str
    vehicle_text: str
    price: Optional[Decimal] = None
    sale_date: Optional[date] = None
    notes: Optional[str] = None
