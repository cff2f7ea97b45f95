# Vehicle, Category, Customer

from sqlalchemy import Column, Boolean, Date, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from dealership.database import Base

class VehicleCategory(Base):
    __tablename__ = "vehicle_category"
    id = Column(Integer, primary_key=True)
    name = Column(String(80), nullable=False)

class Vehicle(Base):
    __tablename__ = "vehicle"
    id = Column(Integer, primary_key=True, index=True)
    plate = Column(String(20), unique=True, nullable=True, index=True)
    brand = Column(String(80), nullable=True)
    model = Column(String(80), nullable=True)
    year = Column(Integer, nullable=True)
    color = Column(String(40), nullable=True)
    mileage = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    fuel = Column(String(40), nullable=True)
    transmission = Column(String(40), nullable=True)
    doors = Column(Integer, nullable=True)
    entry_date = Column(Date, nullable=True, index=True)

    category_id = Column(Integer, ForeignKey("vehicle_category.id", ondelete="SET NULL"), nullable=True, index=True)

    category = relationship("VehicleCategory")

class Customer(Base):
    __tablename__ = "customer"
    id = Column(Integer, primary_key=True, index=True)
    dni = Column(String(20), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(150), nullable=True, index=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(150), nullable=True)
    # Soft delete flag
    active = Column(Boolean, default=True, nullable=False, index=True)
