# Display helpers shared by the repositories' row mappers

from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

EMPTY = "-"

def normalize(value: Optional[str]) -> str:
    """Trim + upper-case, the comparison form of status and role names."""
    return (value or "").strip().upper()

def trimmed(value: Optional[str]) -> str:
    return value.strip() if value is not None else ""

def safe_text(value: Optional[str]) -> str:
    """Blank values are shown as '-'."""
    if value is None or not str(value).strip():
        return EMPTY
    return str(value)

def join_text(*parts) -> str:
    """'Ford' 'Fiesta' None 2017 -> 'Ford Fiesta 2017'"""
    return " ".join(str(p).strip() for p in parts if p is not None and str(p).strip())

def format_code(entity_id: int) -> str:
    return f"{entity_id:05d}"

def format_price(price: Optional[Decimal]) -> str:
    """15000.00 -> '15000', 9999.50 -> '9999.5'"""
    if price is None:
        return EMPTY
    return format(Decimal(price).normalize(), "f")

def format_day(value: Optional[date]) -> str:
    if value is None:
        return EMPTY
    return value.strftime("%d/%m/%Y")

def split_full_name(full_name: str) -> Tuple[str, str]:
    """First word is the first name, everything after it the last name."""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])
