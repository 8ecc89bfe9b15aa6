"""Create (or verify) a user account.

Registration and e-mail verification belong to the authentication subsystem;
this script stands in for them on development databases.

Usage:
  python scripts/create_user.py --name "Alice" --email alice@example.com
  python scripts/create_user.py --email alice@example.com --unverified
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.orm import Session

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from video_comments.config import resolve_database_url
from video_comments.db import create_app_engine
from video_comments.models.base import Base
from video_comments import models  # noqa: F401
from video_comments.models.user import User


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", help="Display name (required for new users)")
    parser.add_argument("--unverified", action="store_true", help="Leave the e-mail unverified")
    args = parser.parse_args(argv)

    load_dotenv()
    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)

    verified_at = None if args.unverified else datetime.now(timezone.utc)

    with Session(engine) as session, session.begin():
        user = session.scalars(select(User).where(User.email == args.email)).first()
        if user is None:
            if not args.name:
                parser.error("--name is required when creating a user")
            user = User(name=args.name, email=args.email, email_verified_at=verified_at)
            session.add(user)
            action = "Created"
        else:
            if args.name:
                user.name = args.name
            user.email_verified_at = verified_at
            action = "Updated"
        session.flush()
        print(f"{action} user {user.id} <{user.email}> verified={user.is_verified}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
