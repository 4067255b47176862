#!/usr/bin/env python3
"""
Script to create the first manager account.
Run this after `alembic upgrade head` has been completed.

Usage:
    python create_manager.py <email> <password> <name>

Example:
    python create_manager.py manager@example.com mypassword123 "Rota Manager"
"""

import sys
from pathlib import Path

# Add the apps/api directory to the path so we can import rotaplan
api_dir = Path(__file__).parent / "apps" / "api"
sys.path.insert(0, str(api_dir))

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from rotaplan.core.database import SessionLocal
from rotaplan.models.manager import Manager
from rotaplan.routers.auth import get_password_hash


def create_manager(email: str, password: str, name: str) -> bool:
    """Create a manager account in the database."""
    db = SessionLocal()

    try:
        existing = db.execute(select(Manager).where(Manager.email == email.lower())).scalar_one_or_none()
        if existing:
            print(f"Manager with email {email} already exists")
            return False

        manager = Manager(
            name=name,
            email=email.lower(),
            password_hash=get_password_hash(password),
            is_active=True,
        )

        db.add(manager)
        db.commit()
        db.refresh(manager)

        print("Manager created successfully")
        print(f"   Manager ID: {manager.manager_id}")
        print(f"   Name: {manager.name}")
        print(f"   Email: {manager.email}")
        return True
    except SQLAlchemyError as e:
        db.rollback()
        print(f"Error creating manager: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print("Usage: python create_manager.py <email> <password> <name>")
        print('Example: python create_manager.py manager@example.com mypassword123 "Rota Manager"')
        sys.exit(1)

    email, password, name = sys.argv[1], sys.argv[2], sys.argv[3]

    if not email or not password or not name:
        print("Email, password, and name are required")
        sys.exit(1)

    success = create_manager(email, password, name)
    sys.exit(0 if success else 1)
