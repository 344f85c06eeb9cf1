"""
First-run seeding: default accounts plus one approved sample article per category.

  python -m supportdesk.scripts.seed [--admin-password PW] [--user-password PW]

Does nothing if the users table already has rows. With APP_ENV=prod both
passwords must be given explicitly; the built-in ones are for local use only.
"""

import argparse
import logging
import sys

from sqlalchemy.orm import Session

from supportdesk.core.config import get_settings
from supportdesk.core.database import Database
from supportdesk.models import Task, User
from supportdesk.models.task import STATUS_APPROVED, TASK_TYPE_ISSUE, TASK_TYPE_QA
from supportdesk.models.user import ROLE_ADMIN, ROLE_USER
from supportdesk.services.users import CredentialStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

DEV_ADMIN_PASSWORD = "admin123"
DEV_USER_PASSWORD = "user123"

DEFAULT_ACCOUNTS: tuple[tuple[str, str], ...] = (
    ("admin@supportdesk.com", ROLE_ADMIN),
    ("john.doe@company.com", ROLE_USER),
    ("sarah.smith@company.com", ROLE_USER),
    ("tech.support@company.com", ROLE_ADMIN),
    ("help.desk@company.com", ROLE_ADMIN),
)

# (category, type, title, description, content, keywords, rating)
SAMPLE_TASKS: tuple[tuple[str, str, str, str, str, list[str], float], ...] = (
    (
        "user-guidance", TASK_TYPE_QA,
        "Getting Started with the Support System",
        "Complete guide for new users on how to use the support desk system",
        "Welcome to our support desk system! This guide walks you through the essential features.",
        ["getting started", "guide", "introduction", "basics"], 4.5,
    ),
    (
        "password-reset", TASK_TYPE_QA,
        "Standard Password Reset Process",
        "Official procedure for resetting your password",
        "Follow these steps to safely reset your password and regain access to your account.",
        ["password", "reset", "security", "access"], 4.7,
    ),
    (
        "incident-solving", TASK_TYPE_ISSUE,
        "Network Connectivity Issues",
        "Troubleshooting guide for network problems",
        "Diagnose and resolve network connectivity issues step by step.",
        ["network", "connectivity", "internet", "troubleshooting"], 4.6,
    ),
    (
        "request-solving", TASK_TYPE_QA,
        "Software Installation Request",
        "Process for requesting new software installation",
        "Learn how to submit and track software installation requests.",
        ["software", "installation", "request", "new"], 4.4,
    ),
    (
        "faq", TASK_TYPE_QA,
        "Common Login Issues",
        "Frequently asked questions about login problems",
        "Answers to the most common login-related questions and issues.",
        ["login", "access", "password", "common"], 4.5,
    ),
    (
        "sla-monitoring", TASK_TYPE_QA,
        "Response Time Standards",
        "Overview of SLA response time requirements",
        "Understanding our service level agreement response time standards.",
        ["SLA", "response", "time", "standards"], 4.7,
    ),
)


def seed_database(db: Session, admin_password: str, user_password: str) -> tuple[int, int]:
    """Create default accounts and sample tasks. Returns (users_created, tasks_created)."""
    if db.query(User.id).first() is not None:
        logger.info("Users table is not empty; skipping seed.")
        return (0, 0)

    store = CredentialStore(db)
    users = [
        store.create(email, admin_password if role == ROLE_ADMIN else user_password, role)
        for email, role in DEFAULT_ACCOUNTS
    ]
    admin = users[0]

    for category, task_type, title, description, content, keywords, rating in SAMPLE_TASKS:
        db.add(
            Task(
                title=title,
                description=description,
                content=content,
                type=task_type,
                category=category,
                status=STATUS_APPROVED,
                keywords=keywords,
                rating=rating,
                user_id=admin.id,
            )
        )
    db.commit()
    return (len(users), len(SAMPLE_TASKS))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed default SupportDesk accounts and articles.")
    parser.add_argument("--admin-password", default=None)
    parser.add_argument("--user-password", default=None)
    args = parser.parse_args(argv)

    settings = get_settings()
    if settings.APP_ENV == "prod" and not (args.admin_password and args.user_password):
        logger.error("APP_ENV=prod: pass --admin-password and --user-password explicitly.")
        return 1

    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        users_created, tasks_created = seed_database(
            db,
            args.admin_password or DEV_ADMIN_PASSWORD,
            args.user_password or DEV_USER_PASSWORD,
        )
        logger.info("Seed completed: users_created=%s tasks_created=%s", users_created, tasks_created)
        return 0
    except Exception as e:
        db.rollback()
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
