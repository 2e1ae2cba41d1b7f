#!/usr/bin/env python3
"""
Script to create admin users for the Store Ratings backend
Usage: python create_admin.py
"""

import sys
import os
from getpass import getpass

# Add the backend directory to the Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from email_validator import validate_email
from sqlalchemy.orm import Session
from database.connection import SessionLocal, create_tables
from services.auth import create_user
from schemas.user import check_name, check_address, check_password
from models.user import User, UserRole

def create_admin_user(db: Session, name: str, email: str, password: str, address: str = "") -> User:
    """
    Create an admin account. Admins can't sign up through the API, so this is
    the way the first one gets in.

    Raises ValueError for an email, name, address or password that breaks the
    account rules and ConflictError when the email is taken.
    """
    return create_user(
        db=db,
        name=check_name(name),
        email=validate_email(email, check_deliverability=False).normalized,
        password=check_password(password),
        address=check_address(address),
        role=UserRole.ADMIN
    )

def prompt_admin_user():
    """Create an admin user interactively"""
    print("🔧 Store Ratings Admin User Creation")
    print("=" * 40)

    create_tables()
    db = SessionLocal()

    try:
        print("📧 Enter admin details:")
        email = input("Email: ").strip()
        name = input("Name (20-60 characters): ").strip()
        address = input("Address (optional): ").strip()
        password = getpass("Password: ")

        print("\n🔨 Creating admin user...")
        user = create_admin_user(db, name=name, email=email, password=password, address=address)

        print(f"✅ Admin user created successfully!")
        print(f"📧 Email: {user.email}")
        print(f"👤 Name: {user.name}")
        print(f"🔑 Role: {user.role.value}")
        print(f"🆔 ID: {user.id}")
    except Exception as e:
        print(f"❌ Error creating admin user: {str(e)}")
        db.rollback()
    finally:
        db.close()

def list_admin_users():
    """List all admin users"""
    print("👥 Current Admin Users")
    print("=" * 40)

    db = SessionLocal()

    try:
        admins = db.query(User).filter(User.role == UserRole.ADMIN).order_by(User.created_at).all()

        if not admins:
            print("No admin users found.")
            return

        for admin in admins:
            print(f"📧 {admin.email}")
            print(f"👤 {admin.name}")
            print(f"📅 Created: {admin.created_at}")
            print(f"🕑 Last login: {admin.last_login or 'never'}")
            print("-" * 30)
    finally:
        db.close()

def main():
    """Main function"""
    print("🚀 Store Ratings Admin Management")
    print("=" * 40)
    print("1. Create Admin User")
    print("2. List Admin Users")
    print("3. Exit")

    while True:
        choice = input("\nSelect option (1-3): ").strip()

        if choice == "1":
            prompt_admin_user()
            break
        elif choice == "2":
            list_admin_users()
            break
        elif choice == "3":
            print("👋 Goodbye!")
            break
        else:
            print("❌ Invalid choice. Please select 1, 2, or 3.")

if __name__ == "__main__":
    main()
