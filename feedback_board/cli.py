"""Command line helpers: create tables and load demo data."""

import argparse
import sys

from feedback_board.config import settings
from feedback_board.database import Base, SessionLocal, engine
from feedback_board.logging_config import configure_logging
from feedback_board.models import User
from feedback_board.security import hash_password
from feedback_board.services import comments as comment_service
from feedback_board.services import feedback as feedback_service

DEMO_PASSWORD = "12345678"

DEMO_USERS = [
    ("John Doe", "john@example.com"),
    ("Jane Smith", "jane@example.com"),
    ("Mike Johnson", "mike@example.com"),
]

DEMO_FEEDBACK = [
    (
        "Add dark mode support",
        "It would be great to have a dark mode option for the application. This would help users "
        "who work in low-light environments and prefer darker interfaces.",
        "feature",
        0,
    ),
    (
        "Improve search functionality",
        "The current search feature is quite basic. It would be helpful to have advanced search "
        "options like filtering by date, category, and user.",
        "enhancement",
        1,
    ),
    (
        "Fix mobile responsiveness issues",
        "Several pages do not render correctly on small screens; buttons overlap and tables overflow.",
        "bug",
        2,
    ),
]


def cmd_init_db(args) -> int:
    Base.metadata.create_all(bind=engine)
    print("Tables created")
    return 0


def cmd_seed(args) -> int:
    """Create demo users, feedback items and a short threaded discussion."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == DEMO_USERS[0][1]).first():
            print("Demo data already present, skipping seed.")
            return 0

        users = []
        for name, email in DEMO_USERS:
            user = User(name=name, email=email, password_hash=hash_password(DEMO_PASSWORD))
            db.add(user)
            users.append(user)
        db.commit()

        for title, description, category, author_index in DEMO_FEEDBACK:
            feedback = feedback_service.create_feedback(db, users[author_index].id, title, description, category)
            root = comment_service.create_comment(
                db,
                feedback.id,
                users[(author_index + 1) % len(users)].id,
                f"<p>Agreed, this matters. [{users[author_index].name}] any timeline?</p>",
            )
            comment_service.create_comment(
                db,
                feedback.id,
                users[author_index].id,
                f"<p>Thanks [{users[(author_index + 1) % len(users)].name}], it is on the list.</p>",
                parent_id=root.id,
            )
            print(f"Created feedback: {title} (id: {feedback.id})")
    finally:
        db.close()

    print(f"Demo users share the password {DEMO_PASSWORD!r}")
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("feedback_board.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="feedback-board", description="Product feedback board utilities")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables").set_defaults(func=cmd_init_db)
    sub.add_parser("seed", help="Load demo users, feedback and comments").set_defaults(func=cmd_seed)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.HOST)
    serve.add_argument("--port", type=int, default=settings.PORT)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(log_level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
