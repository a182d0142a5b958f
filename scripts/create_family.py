"""Bootstrap a family and its admin login from the command line."""

from __future__ import annotations

import argparse
import secrets
import string
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

ALPHABET = string.ascii_letters + string.digits


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Create a family with an admin member in public.families/members.",
    )
    parser.add_argument("family_name", type=str, help="Display name of the family.")
    parser.add_argument("--admin-name", type=str, required=True, help="Admin display name.")
    parser.add_argument("--email", type=str, required=True, help="Admin login email.")
    parser.add_argument(
        "--password",
        type=str,
        default=None,
        help="Admin password (a random one is generated and printed when omitted).",
    )
    return parser.parse_args()


def random_password(length: int = 16) -> str:
    """Return a random alphanumeric password."""
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def create_family(family_name: str, admin_name: str, email: str, password: str) -> dict:
    """Create the admin login, then the family and its admin member row."""
    if not family_name.strip():
        raise ValueError("family_name must not be blank")

    from app.services.member_service import FamilyService
    from app.utils.supabase_client import get_service_client

    client = get_service_client()
    normalized_email = email.strip().lower()
    response = client.auth.admin.create_user(
        {"email": normalized_email, "password": password, "email_confirm": True}
    )
    return FamilyService(client).register(
        user_id=str(response.user.id),
        email=normalized_email,
        family_name=family_name.strip(),
        name=admin_name.strip(),
    )


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    password = args.password or random_password()
    result = create_family(args.family_name, args.admin_name, args.email, password)
    print(f"Created family {result['family']['id']} ({result['family']['name']})")
    print(f"Admin: {result['member']['email']}")
    if not args.password:
        print(f"Generated password: {password}")


if __name__ == "__main__":
    main()
