"""
Drop every overlay (tickets, community, notices, outages, users) so fixtures show through unchanged.
The session record is kept unless --session is given.
Run: python scripts/clear_simulated_data.py [--session] (from project root)
"""
import os
import sys
import argparse

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from portal.database import Base, SessionLocal, engine
from portal.models import StoredValue  # noqa: F401
from portal.services.overlay import OverlayStore
from portal.services.session import SessionState
from portal.services.storage import SqlStorage


def main():
    parser = argparse.ArgumentParser(description="Clear simulated portal data")
    parser.add_argument("--session", action="store_true", help="Also clear the simulated session")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        storage = SqlStorage(db)
        OverlayStore(storage).clear()
        print("Cleared all overlays.")
        if args.session:
            SessionState(storage).clear()
            print("Cleared session.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
