# Dealership, Role, User, Tokens

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, ForeignKey, func
from sqlalchemy.orm import relationship
from dealership.database import Base

class Dealership(Base):
    __tablename__ = "dealership"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)

class Role(Base):
    __tablename__ = "role"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    users = relationship("User", back_populates="role")

class User(Base):
    __tablename__ = "user"
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    username = Column(String(80), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(250), index=True, nullable=True)

    # Foreign Keys
    dealership_id = Column(Integer, ForeignKey("dealership.id"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("role.id"), nullable=False, index=True)

    # Mechanics only
    skills = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    dealership = relationship("Dealership")
    role = relationship("Role", back_populates="users")
    tokens = relationship("UserToken", back_populates="user", cascade="all, delete-orphan")

class UserToken(Base):
    __tablename__ = "user_tokens"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)

    access_key = Column(String(250), nullable=True, index=True, default=None)
    refresh_key = Column(String(250), nullable=True, index=True, default=None)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="tokens")
