"""Storefront database management CLI.

Creates and drops the database schemas of the catalogue and ordering domains,
and can stock a fresh catalogue with sample products for local development.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db                 # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db --domain ordering
    python src/manage.py seed-catalogue --count 12
"""

import argparse
import sys

DOMAIN_NAMES = ["catalogue", "ordering"]

SAMPLE_PRODUCTS = [
    ("Beaded Leather Sandals", 18500, "footwear"),
    ("Ankara Print Tote", 9000, "bags"),
    ("Adire Silk Scarf", 12500, "accessories"),
    ("Agbada Three-Piece Set", 65000, "clothing"),
    ("Coral Bead Necklace", 27000, "jewellery"),
    ("Aso Oke Gele", 15000, "accessories"),
]


def _domains(names=None):
    from catalogue.domain import catalogue
    from ordering.domain import ordering

    registry = {"catalogue": catalogue, "ordering": ordering}
    return {name: registry[name] for name in (names or DOMAIN_NAMES)}


def _apply(action, label, domains=None):
    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"{label} {name} database schema...")
        action(domain)
    print("Done.")


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    _apply(setup_db, "Creating", domains)


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    _apply(drop_db, "Dropping", domains)


def seed_catalogue(count):
    """Create ``count`` visible sample products through the admin command."""
    from protean.utils.globals import current_domain

    from catalogue.product.management import CreateProduct

    catalogue = _domains(["catalogue"])["catalogue"]
    catalogue.init()
    with catalogue.domain_context():
        for index in range(count):
            name, price, category = SAMPLE_PRODUCTS[index % len(SAMPLE_PRODUCTS)]
            if index >= len(SAMPLE_PRODUCTS):
                name = f"{name} No. {index // len(SAMPLE_PRODUCTS) + 1}"
            current_domain.process(
                CreateProduct(
                    name=name,
                    price=price,
                    category=category,
                    inventory_count=25,
                ),
                asynchronous=False,
            )
            print(f"  {name} ({price})")
    print(f"Seeded {count} products.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("setup-db", "Create all database tables"),
        ("drop-db", "Drop all database tables"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    seed_parser = subparsers.add_parser("seed-catalogue", help="Add sample products")
    seed_parser.add_argument("--count", type=int, default=len(SAMPLE_PRODUCTS))

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed-catalogue":
        seed_catalogue(args.count)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
