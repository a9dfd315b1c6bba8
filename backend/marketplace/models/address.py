from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from marketplace.db import Base


class Address(Base):
    __tablename__ = "addresses"
    id = Column(Integer, primary_key=True, index=True)
    client_profile_id = Column(
        Integer,
        ForeignKey("client_profiles.id", ondelete="CASCADE"),
        unique=True,
        nullable=True,
        index=True,
    )
    street = Column(String(256), nullable=False)
    number = Column(String(32), nullable=False)
    complement = Column(String(256), nullable=True)
    city = Column(String(128), nullable=False)
    state = Column(String(64), nullable=False)
    postal_code = Column(String(32), nullable=False)

    client_profile = relationship("ClientProfile", back_populates="address")
