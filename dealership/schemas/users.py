# dealership/schemas/users.py

# Auth, Session, Mechanics

from typing import Optional
from pydantic import BaseModel, Field

# --- AUTH ---
class AuthUser(BaseModel):
    id: int
    dealership_id: int
    role_name: str
    full_name: str = ""

class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
    user_id: int
    username: str
    role: str
    dealership_id: int

class SessionOut(BaseModel):
    user_id: int
    full_name: str
    role: str
    dealership_id: int

# --- LOOKUPS ---
class IdName(BaseModel):
    id: int
    name: str

# --- MECHANICS (boss screens) ---
class MechanicSkillRow(BaseModel):
    id: int
    full_name: str
    skills: str
    status: str

class MechanicSkillsOut(BaseModel):
    mechanic_id: int
    skills: str

class MechanicSkillsUpdate(BaseModel):
    skills: str = Field("", max_length=2000)
