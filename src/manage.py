"""Dee-licious Bakes database management CLI.

Provides commands to create and drop database schemas for all domains, to
load the starter catalogue and to send scheduled emails.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load starter categories, tags, allergens and products
    python src/manage.py send-due-emails  # Send scheduled emails that are due (run from cron)
"""

import argparse
import sys

from shared.utils.db import drop_db, setup_db

DOMAIN_NAMES = ["identity", "catalogue", "ordering", "messaging", "notifications"]


def _load_domains(names=None) -> dict:
    from catalogue.domain import catalogue
    from identity.domain import identity
    from messaging.domain import messaging
    from notifications.domain import notifications
    from ordering.domain import ordering

    all_domains = {
        "identity": identity,
        "catalogue": catalogue,
        "ordering": ordering,
        "messaging": messaging,
        "notifications": notifications,
    }
    return {n: all_domains[n] for n in names} if names else all_domains


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def seed():
    from catalogue.domain import catalogue
    from catalogue.seed import seed_catalogue

    catalogue.init()
    with catalogue.domain_context():
        counts = seed_catalogue()

    for kind, count in counts.items():
        print(f"  {kind}: {count} created")
    print("Done.")


def send_due_emails():
    from notifications.domain import notifications
    from notifications.notification.delivery import SendDueNotifications

    notifications.init()
    with notifications.domain_context():
        result = notifications.process(SendDueNotifications(), asynchronous=False)

    print(f"  {result['sent']} of {result['due']} scheduled emails sent")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Dee-licious Bakes database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    subparsers.add_parser("seed", help="Load the starter catalogue")
    subparsers.add_parser("send-due-emails", help="Send scheduled emails whose time has come")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed":
        seed()
    elif args.command == "send-due-emails":
        send_due_emails()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
