"""HomePlate management CLI.

Creates and drops the ordering database schema, and issues development
bearer tokens.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py issue-token alice@example.com --role chef --chef-id chef-7
"""

import argparse
import sys


def setup_database():
    """Create the ordering schema in the configured provider."""
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating ordering database schema...")
    setup_db(ordering)
    print("Done.")


def drop_database():
    """Drop the ordering schema from the configured provider."""
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping ordering database schema...")
    drop_db(ordering)
    print("Done.")


def issue_token(email, role, chef_id, ttl_minutes):
    from ordering.access.tokens import encode_token

    print(encode_token(email, role=role, chef_id=chef_id, ttl_minutes=ttl_minutes))


def main():
    parser = argparse.ArgumentParser(description="HomePlate ordering management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    token_parser = subparsers.add_parser("issue-token", help="Issue a development bearer token")
    token_parser.add_argument("email")
    token_parser.add_argument("--role", choices=["user", "chef", "admin"], default="user")
    token_parser.add_argument("--chef-id", default=None)
    token_parser.add_argument("--ttl-minutes", type=int, default=60)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "issue-token":
        issue_token(args.email, args.role, args.chef_id, args.ttl_minutes)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
