#!/usr/bin/env python3
"""
Change a user's role directly in the database.

Usage:
  python scripts/set_role.py --email someone@example.com --role admin
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from memberhub.domain import targets
from memberhub.domain.validation import normalize_email
from memberhub.repositories.sql_repository import SQLRepository

ROLES = (targets.ROLE_ADMIN, targets.ROLE_USER, targets.ROLE_STORE, targets.ROLE_INFLUENCER)


def main() -> None:
    ap = argparse.ArgumentParser(description="Set the role of an existing user")
    ap.add_argument("--email", required=True, help="Account email")
    ap.add_argument("--role", required=True, choices=ROLES)
    args = ap.parse_args()

    repo = SQLRepository()
    email = normalize_email(args.email)
    user = repo.get_user_by_email(email)
    if not user:
        raise SystemExit(f"User '{email}' does not exist")
    if user.role == args.role:
        print(f"OK: {email} already has role '{args.role}'")
        return
    repo.set_user_role(user.id, args.role)
    print(f"OK: {email} role {user.role} -> {args.role}")


if __name__ == "__main__":
    main()
