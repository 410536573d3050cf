from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from smartauto.core.database import Base
from smartauto.models.enums import RentalStatus


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_date = Column(Date, index=True, nullable=False)
    end_date = Column(Date, nullable=False)
    customer_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), index=True, nullable=False)
    status = Column(String(20), default=RentalStatus.pending.value, nullable=False)  # pending | approved | rejected

    customer = relationship("User", back_populates="rentals_as_customer", foreign_keys=[customer_id])
    owner = relationship("User", back_populates="rentals_as_owner", foreign_keys=[owner_id])
    vehicle = relationship("Vehicle", back_populates="rentals")
