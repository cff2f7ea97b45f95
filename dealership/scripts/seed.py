"""Seed script: creates the roles, a dealership and one user account.

Run with `python -m dealership.scripts.seed`.
"""

import getpass
import sys

from dealership import models
from dealership.database import Base, SessionLocal, engine
from dealership.security import hash_password
from dealership.session import MECHANIC, CHIEF_MECHANIC, SALES, OWNER, canonical_role

ROLES = [MECHANIC, CHIEF_MECHANIC, SALES, OWNER]


def ensure_roles(db) -> dict:
    existing = {canonical_role(r.name): r for r in db.query(models.Role).all()}
    for name in ROLES:
        if name not in existing:
            role = models.Role(name=name)
            db.add(role)
            existing[name] = role
    db.commit()
    return existing


def ensure_dealership(db, name: str) -> models.Dealership:
    dealership = db.query(models.Dealership).filter(models.Dealership.name == name).first()
    if not dealership:
        dealership = models.Dealership(name=name)
        db.add(dealership)
        db.commit()
        db.refresh(dealership)
    return dealership


def main():
    Base.metadata.create_all(bind=engine)

    dealership_name = input("Dealership name: ").strip()
    username = input("Username: ").strip()
    full_name = input("Full name: ").strip()
    role_name = canonical_role(input(f"Role ({', '.join(ROLES)}): "))
    if not dealership_name or not username:
        print("Dealership and username cannot be empty.")
        return 1
    if role_name not in ROLES:
        print(f"Unknown role '{role_name}'.")
        return 1

    password = getpass.getpass("Password: ")
    if len(password) < 6:
        print("Password must be at least 6 characters.")
        return 1
    if password != getpass.getpass("Confirm password: "):
        print("Passwords do not match.")
        return 1

    db = SessionLocal()
    try:
        roles = ensure_roles(db)
        dealership = ensure_dealership(db, dealership_name)

        if db.query(models.User).filter(models.User.username == username).first():
            print(f"User '{username}' already exists.")
            return 1

        user = models.User(
            username=username,
            password_hash=hash_password(password),
            full_name=full_name or None,
            dealership_id=dealership.id,
            role_id=roles[role_name].id,
        )
        db.add(user)
        db.commit()
        print(f"User '{username}' created (id={user.id}, role={role_name}, dealership={dealership.id}).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
