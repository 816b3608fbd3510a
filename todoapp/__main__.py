"""CLI entry point: ``python -m todoapp``."""

from __future__ import annotations

import argparse

from . import queries
from .database import drop_db, get_db_session, init_db
from .logger import logger
from .schemas import NewTodo

DEMO_TODOS = ("Todo 1", "Todo 2")


def seed(email: str, password: str, name: str) -> bool:
    """Create a demo user owning a couple of todos.

    Returns False without touching anything when the email is already taken.
    """
    with get_db_session() as session:
        if queries.get_user_by_email(session, email):
            logger.info(f"User {email} already exists, nothing to seed")
            return False
        user = queries.create_user(session, email=email, name=name, password=password)
        for title in DEMO_TODOS:
            queries.insert_todo(session, NewTodo(title=title, user_id=user.id))
    logger.info(f"Seeded user {email} with {len(DEMO_TODOS)} todos")
    return True


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="todoapp",
        description="Manage the todo application database.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create all tables.")
    subparsers.add_parser("drop-db", help="Drop all tables.")

    seed_parser = subparsers.add_parser("seed", help="Create a demo user with two todos.")
    seed_parser.add_argument("--email", default="demo@example.com")
    seed_parser.add_argument("--password", default="password123")
    seed_parser.add_argument("--name", default="Demo User")

    args = parser.parse_args(argv)

    if args.command == "init-db":
        init_db()
        logger.info("Database tables created")
    elif args.command == "drop-db":
        drop_db()
        logger.info("Database tables dropped")
    elif args.command == "seed":
        init_db()
        seed(args.email, args.password, args.name)


if __name__ == "__main__":
    main()
