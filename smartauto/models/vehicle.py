from sqlalchemy import Boolean, Column, Float, Integer, String
from sqlalchemy.orm import relationship

from smartauto.core.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    make = Column(String, nullable=False)
    model = Column(String, index=True, nullable=False)
    year = Column(Integer, index=True, nullable=False)
    color = Column(String, nullable=False)
    daily_rate = Column(Float, nullable=False)
    # Only the rental workflow flips this flag
    available = Column(Boolean, default=True, nullable=False)

    categories = relationship("Category", secondary="category_vehicles", back_populates="vehicles")
    rentals = relationship("Rental", back_populates="vehicle", cascade="all, delete-orphan")
