"""Issue a bearer token for local development.

Usage: python scripts/create_dev_token.py [customer|admin] [user_id] [email]
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rxengine.config import settings
from rxengine.database import SessionLocal, init_db
from rxengine.services.auth_service import create_access_token
from rxengine.services.config_service import ConfigService


def main(argv):
    role = argv[1] if len(argv) > 1 else "customer"
    if role not in ("customer", "admin"):
        print(f"Unknown role: {role}")
        return 1

    user_id = argv[2] if len(argv) > 2 else f"dev-{role}-001"
    email = argv[3] if len(argv) > 3 else f"{role}@test.com"

    # Make sure the local database is usable before handing out tokens
    init_db()
    db = SessionLocal()
    try:
        ConfigService(db).initialize_defaults()
    finally:
        db.close()

    token = create_access_token(user_id, email, role=role)
    print(f"✓ Token for {email} ({role}), valid {settings.ACCESS_TOKEN_EXPIRE_MINUTES} minutes:")
    print(f"  Authorization: Bearer {token}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
