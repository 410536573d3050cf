from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from smartauto.core.database import Base
from smartauto.models.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    state = Column(String(2), nullable=False)
    city = Column(String, nullable=False)
    street = Column(String, nullable=False)
    number = Column(Integer, nullable=False)
    role = Column(String(20), default=Role.customer.value, nullable=False)

    rentals_as_customer = relationship(
        "Rental", back_populates="customer", foreign_keys="Rental.customer_id"
    )
    rentals_as_owner = relationship(
        "Rental", back_populates="owner", foreign_keys="Rental.owner_id"
    )
