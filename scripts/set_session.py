"""
Switch the simulated session without going through the API (no fixture checks).

Usage (from project root):
  python scripts/set_session.py --role Admin --user-id U-9001 --property-id P-001
  python scripts/set_session.py --role Renter --user-id U-1001 --property-id P-001 --cabin-id C-014
"""
import os
import sys
import argparse

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from portal.database import Base, SessionLocal, engine
from portal.models import StoredValue  # noqa: F401
from portal.schemas.session import PortalSession
from portal.schemas.user import UserRole
from portal.services.session import SessionState
from portal.services.storage import SqlStorage


def main():
    parser = argparse.ArgumentParser(description="Set the simulated session")
    parser.add_argument("--role", choices=[r.value for r in UserRole], required=True)
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--property-id", required=True)
    parser.add_argument("--cabin-id", default=None, help="Renter only")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        session = SessionState(SqlStorage(db)).set(
            PortalSession(
                role=UserRole(args.role),
                user_id=args.user_id,
                property_id=args.property_id,
                cabin_id=args.cabin_id,
            )
        )
        print(f"Session: role={session.role.value} user={session.user_id} property={session.property_id} cabin={session.cabin_id or '-'}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
