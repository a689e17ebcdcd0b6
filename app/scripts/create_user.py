"""
Create a customer or provider account without going through the API. Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Jane Doe" jane@example.com her-password provider
"""
import argparse
import sys

from dotenv import load_dotenv

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.core.errors import ConflictError, ValidationError
from app.models.user import UserRole
from app.services.auth import register


def main() -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Create a RepairConnect user.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Login email (must be unique)")
    parser.add_argument("password", help="Password")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.CUSTOMER.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args()

    settings = get_settings()
    engine = build_engine(settings)
    db = build_session_factory(engine)()
    try:
        user = register(
            db,
            settings,
            name=args.name,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    except (ValidationError, ConflictError) as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user {user.id} '{user.email}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
