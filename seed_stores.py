#!/usr/bin/env python3
"""
Seed script to create sample owners, stores, users and ratings for local development
Usage: python seed_stores.py
"""
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy.orm import Session
from database.connection import SessionLocal, create_tables
from models.user import UserRole
from models.store import Store
from schemas.store import StoreCreate
from schemas.rating import RatingCreate
from services.auth import create_user, get_user_by_email
from services.store import create_store, get_store_by_owner_id
from services.rating import RatingService

SAMPLE_PASSWORD = "Password1!"

STORE_OWNERS = [
    {
        "name": "Jean-Baptiste Mballa Owner",
        "email": "jean.mballa@techhub.example.com",
        "address": "12 Akwa Boulevard, Douala",
        "store": {"name": "TechHub Electronics Centre", "address": "12 Akwa Boulevard, Douala"},
    },
    {
        "name": "Marie-Claire Fokou Owner",
        "email": "marie.fokou@fashionforward.example.com",
        "address": "4 Avenue Kennedy, Yaounde",
        "store": {"name": "Fashion Forward Boutique", "address": "4 Avenue Kennedy, Yaounde"},
    },
    {
        "name": "Paul-Emmanuel Nkomo Owner",
        "email": "paul.nkomo@homegarden.example.com",
        "address": "88 Rue Joss, Bonanjo, Douala",
        "store": {"name": "Home and Garden Supplies Plus", "address": "88 Rue Joss, Bonanjo, Douala"},
    },
]

RATERS = [
    {
        "name": "Alice Tagne Regular Customer",
        "email": "alice.tagne@example.com",
        "address": "7 Bonapriso Street, Douala",
        "ratings": [5, 4, 3],
    },
    {
        "name": "Samuel Eto Frequent Shopper",
        "email": "samuel.eto@example.com",
        "address": "21 Bastos Avenue, Yaounde",
        "ratings": [4, 2, 5],
    },
]

def seed_sample_data(db: Session) -> dict:
    """Create the sample data; already-present rows are left as they are."""
    counts = {"users": 0, "stores": 0, "ratings": 0}
    stores = []

    for owner_data in STORE_OWNERS:
        owner = get_user_by_email(db, owner_data["email"])
        if not owner:
            owner = create_user(
                db=db,
                name=owner_data["name"],
                email=owner_data["email"],
                password=SAMPLE_PASSWORD,
                address=owner_data["address"],
                role=UserRole.STORE_OWNER
            )
            counts["users"] += 1
            print(f"Created store owner: {owner.name}")
        else:
            print(f"Store owner already exists: {owner.name}")

        store = get_store_by_owner_id(db, owner.id)
        if not store:
            store = create_store(db, StoreCreate(owner_id=owner.id, **owner_data["store"]))
            counts["stores"] += 1
            print(f"Created store: {store.name}")
        stores.append(store)

    for rater_data in RATERS:
        rater = get_user_by_email(db, rater_data["email"])
        if not rater:
            rater = create_user(
                db=db,
                name=rater_data["name"],
                email=rater_data["email"],
                password=SAMPLE_PASSWORD,
                address=rater_data["address"],
                role=UserRole.USER
            )
            counts["users"] += 1
            print(f"Created user: {rater.name}")

        for store, value in zip(stores, rater_data["ratings"]):
            if RatingService.get_rating(db, rater.id, store.id):
                continue
            RatingService.create_rating(db, rater.id, RatingCreate(store_id=store.id, rating_value=value))
            counts["ratings"] += 1

    return counts

def main():
    print("Starting store data seeding...")
    create_tables()

    db = SessionLocal()
    try:
        counts = seed_sample_data(db)
        print(f"\nCreated {counts['users']} users, {counts['stores']} stores and {counts['ratings']} ratings")

        print("\nStore Details:")
        for store in db.query(Store).order_by(Store.created_at).all():
            print(f"  • {store.name} (Owner: {store.owner.name})")
            print(f"    - Address: {store.address}")
            print(f"    - Ratings: {len(store.ratings)}")
    except Exception as e:
        print(f"Error during seeding: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    main()
