# Repair orders and history

from typing import Optional
from pydantic import BaseModel, Field, field_validator

# --- READ MODELS ---
class RepairTaskRow(BaseModel):
    repair_id: int
    vehicle: str
    status: str

class BossRepairEditDetails(BaseModel):
    repair_id: int
    vehicle_text: str
    status: str
    notes: str
    mechanic_id: Optional[int] = None
    mechanic_name: str = ""
    editable: bool

class RepairDetails(BaseModel):
    repair_id: int
    status: str
    status_label: str
    notes: str
    customer_id: int
    customer_name: str
    customer_dni: str
    customer_phone: str
    customer_email: str
    vehicle_text: str
    can_start: bool
    can_finish: bool

class RepairHistoryRow(BaseModel):
    repair_id: int
    vehicle: str
    status: str
    end_date: str

# --- COMMANDS ---
class RepairCreate(BaseModel):
    vehicle_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    mechanic_id: int = Field(..., gt=0)
    notes: str

    @field_validator("notes")
    @classmethod
    def notes_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Write some notes before creating the repair.")
        return v

class RepairCreated(BaseModel):
    repair_id: int
    status: str

class RepairAssign(BaseModel):
    mechanic_id: int = Field(..., gt=0)
    notes: str = ""

class RepairNotes(BaseModel):
    notes: str = ""

class RepairActionResult(BaseModel):
    repair_id: int
    status: str
    message: str
