from typing import Optional

from sqlalchemy.orm import Session

from marketplace.models.address import Address
from marketplace.models.store import Store
from marketplace.models.user import ClientProfile, User


class ProfileRepository:
    """Read-only lookups on the accounts side: users, client profiles, addresses, stores."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_client_profile(self, user_id: int) -> Optional[ClientProfile]:
        return (
            self.db.query(ClientProfile)
            .filter(ClientProfile.user_id == user_id)
            .first()
        )

    def get_address_for_client(self, client_profile_id: int) -> Optional[Address]:
        return (
            self.db.query(Address)
            .filter(Address.client_profile_id == client_profile_id)
            .first()
        )

    def get_store(self, store_id: int) -> Optional[Store]:
        return self.db.query(Store).filter(Store.id == store_id).first()

    def get_store_for_owner(self, user_id: int) -> Optional[Store]:
        return (
            self.db.query(Store)
            .filter(Store.owner_user_id == user_id)
            .order_by(Store.id)
            .first()
        )
