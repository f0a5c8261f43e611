"""Print the persisted overlay envelopes and session record as JSON."""
import os
import sys
import json

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from portal.database import Base, SessionLocal, engine
from portal.models import StoredValue  # noqa: F401
from portal.services.overlay import OVERLAY_KEYS
from portal.services.session import SESSION_KEY
from portal.services.storage import SqlStorage


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        storage = SqlStorage(db)
        for key in (SESSION_KEY, *OVERLAY_KEYS):
            raw = storage.get(key)
            print(f"== {key}")
            if raw is None:
                print("(empty)")
                continue
            try:
                print(json.dumps(json.loads(raw), indent=2))
            except ValueError:
                print(f"(not valid JSON) {raw[:200]}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
