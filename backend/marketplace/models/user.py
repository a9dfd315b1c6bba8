import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from marketplace.db import Base


class UserRole(enum.Enum):
    CLIENT = "CLIENT"
    PRODUCER = "PRODUCER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.CLIENT)

    client_profile = relationship("ClientProfile", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"


class ClientProfile(Base):
    __tablename__ = "client_profiles"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    document = Column(String(32), unique=True, nullable=True)  # tax id, optional

    user = relationship("User", back_populates="client_profile")
    address = relationship("Address", back_populates="client_profile", uselist=False)
