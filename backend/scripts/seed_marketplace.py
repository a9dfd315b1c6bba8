#!/usr/bin/env python3
"""
Seed a demo marketplace: a client with a delivery address, producers with
their stores and products.

Reads stores from a JSON file when --file is given, otherwise uses the
built-in demo catalogue. Running it twice does not duplicate users.

Usage:
    python scripts/seed_marketplace.py
    python scripts/seed_marketplace.py --file stores.json --reset
"""
import argparse
import json
import logging
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from marketplace.db import SessionLocal, init_db
from marketplace.models.address import Address
from marketplace.models.store import Store
from marketplace.models.user import ClientProfile, User, UserRole
from marketplace.repositories.product_repo import ProductRepository
from marketplace.utils.transactions import smart_transaction

log = logging.getLogger("marketplace.seed")

DEMO_STORES = [
    {
        "owner": {"name": "Sitio Boa Terra", "email": "boaterra@example.com"},
        "name": "Boa Terra Organics",
        "description": "Vegetables picked the same morning",
        "products": [
            {"name": "Tomatoes 1kg", "price": 10.00, "category": "vegetables"},
            {"name": "Lettuce", "price": 4.50, "category": "vegetables"},
            {"name": "Wildflower Honey 500g", "price": 25.00, "category": "pantry"},
        ],
    },
    {
        "owner": {"name": "Laticinios Serra", "email": "serra@example.com"},
        "name": "Serra Dairy",
        "description": "Artisan cheese and milk",
        "products": [
            {"name": "Fresh Cheese", "price": 7.50, "category": "dairy"},
            {"name": "Butter 200g", "price": 12.90, "category": "dairy"},
        ],
    },
]

DEMO_CLIENT = {
    "name": "Demo Client",
    "email": "client@example.com",
    "address": {
        "street": "Rua das Flores",
        "number": "42",
        "city": "Recife",
        "state": "PE",
        "postal_code": "50000-000",
    },
}


def _price_cents(entry) -> int:
    if entry.get("price_cents") is not None:
        return int(entry["price_cents"])
    return int(round(float(entry.get("price", 0)) * 100))


def _get_or_create_user(db, name, email, role):
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user, False
    user = User(name=name, email=email, role=role)
    db.add(user)
    db.flush()
    return user, True


def seed(stores, client=DEMO_CLIENT):
    db = SessionLocal()
    repo = ProductRepository(db)
    created = 0
    try:
        with smart_transaction(db):
            user, is_new = _get_or_create_user(db, client["name"], client["email"], UserRole.CLIENT)
            if is_new:
                profile = ClientProfile(user_id=user.id)
                db.add(profile)
                db.flush()
                db.add(Address(client_profile_id=profile.id, **client["address"]))

            for entry in stores:
                owner = entry["owner"]
                producer, is_new = _get_or_create_user(db, owner["name"], owner["email"], UserRole.PRODUCER)
                if not is_new:
                    continue
                store = Store(
                    name=entry["name"],
                    description=entry.get("description"),
                    owner_user_id=producer.id,
                )
                db.add(store)
                db.flush()
                for p in entry.get("products", []):
                    repo.create(
                        store_id=store.id,
                        name=p["name"],
                        price_cents=_price_cents(p),
                        description=p.get("description"),
                        image=p.get("image"),
                        category=p.get("category"),
                    )
                    created += 1
        print("Seeded products:", created)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="JSON list of stores with their products")
    parser.add_argument("--reset", action="store_true", help="drop and recreate tables first")
    args = parser.parse_args()

    stores = DEMO_STORES
    if args.file:
        if not os.path.exists(args.file):
            print("File not found:", args.file)
            sys.exit(1)
        with open(args.file, "r", encoding="utf-8") as f:
            stores = json.load(f)

    init_db(reset=args.reset)
    seed(stores)
