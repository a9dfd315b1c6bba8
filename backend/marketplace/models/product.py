from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from marketplace.db import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    image = Column(String(512), nullable=True)
    category = Column(String(64), nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    store = relationship("Store", back_populates="products")

    def __repr__(self):
        return f"<Product id={self.id} name={self.name} store={self.store_id}>"
