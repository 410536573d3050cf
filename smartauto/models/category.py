from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from smartauto.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=False, default="")

    vehicles = relationship("Vehicle", secondary="category_vehicles", back_populates="categories")


class CategoryVehicle(Base):
    """Join table between categories and vehicles; carries only the two keys."""

    __tablename__ = "category_vehicles"

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), primary_key=True)
