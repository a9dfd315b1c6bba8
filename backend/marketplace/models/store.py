from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from marketplace.db import Base


class Store(Base):
    __tablename__ = "stores"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    owner_user_id = Column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )  # producer running the store

    products = relationship("Product", back_populates="store")

    def __repr__(self):
        return f"<Store id={self.id} name={self.name}>"
