#!/usr/bin/env python3
"""
Database management script for Timeledger.
Handles migrations, table creation, demo seeding and development tokens.
"""

import sys
from pathlib import Path

from alembic.config import Config
from alembic import command

from timeledger.domain.models.directory import UserRole
from timeledger.infrastructure.auth.jwt_handler import JWTHandler
from timeledger.infrastructure.db.database import SessionLocal, engine
from timeledger.infrastructure.db.models import ClientModel, EmployeeModel, ProjectModel, create_all_tables


ALEMBIC_INI = Path(__file__).parent / "timeledger" / "infrastructure" / "db" / "migrations" / "alembic.ini"

DEMO_CLIENTS = ["Acme Corp", "Globex"]
DEMO_PROJECTS = [
    ("Website Redesign", "#6366f1", "Acme Corp"),
    ("Mobile App", "#10b981", "Acme Corp"),
    ("Data Platform", "#f59e0b", "Globex"),
    ("Internal Tools", "#cbd5e1", None),
]
DEMO_EMPLOYEES = [
    ("Ada Admin", "admin@example.com", UserRole.ADMIN),
    ("Carl Collaborator", "carl@example.com", UserRole.COLLABORATOR),
    ("Dana Developer", "dana@example.com", UserRole.COLLABORATOR),
]


def alembic_config() -> Config:
    return Config(str(ALEMBIC_INI))


def create_migration(message: str = "Auto-generated migration"):
    """Create a new migration."""
    print(f"Creating migration: {message}")
    command.revision(alembic_config(), message=message, autogenerate=True)


def run_migrations():
    """Run pending migrations."""
    print("Running migrations...")
    command.upgrade(alembic_config(), "head")


def rollback_migration():
    """Rollback last migration."""
    print("Rolling back migration...")
    command.downgrade(alembic_config(), "-1")


def show_current_revision():
    """Show current database revision."""
    command.current(alembic_config())


def show_history():
    """Show migration history."""
    command.history(alembic_config())


def create_tables():
    """Create every table directly from the models, without migrations."""
    print("Creating tables...")
    create_all_tables(engine)


def seed_demo_data():
    """Insert demo clients, projects and employees if the directory is empty."""
    session = SessionLocal()
    try:
        if session.query(EmployeeModel).count():
            print("Directory already seeded, skipping.")
            return

        clients = {name: ClientModel(name=name) for name in DEMO_CLIENTS}
        session.add_all(clients.values())
        session.flush()

        for name, color, client_name in DEMO_PROJECTS:
            client = clients.get(client_name)
            session.add(ProjectModel(name=name, color=color, client_id=client.id if client else None))

        for name, email, role in DEMO_EMPLOYEES:
            session.add(EmployeeModel(name=name, email=email, role=role))

        session.commit()
        print(f"Seeded {len(DEMO_CLIENTS)} clients, {len(DEMO_PROJECTS)} projects, {len(DEMO_EMPLOYEES)} employees.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def print_token(employee_id: str, role: str = UserRole.COLLABORATOR.value):
    """Print a bearer token for local testing."""
    print(JWTHandler().create_access_token(int(employee_id), UserRole(role)))


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create [msg]        - Create new migration")
        print("  migrate             - Run pending migrations")
        print("  rollback            - Rollback last migration")
        print("  current             - Show current revision")
        print("  history             - Show migration history")
        print("  create-tables       - Create tables from the models")
        print("  seed                - Insert demo clients, projects and employees")
        print("  token <id> [role]   - Print a bearer token (role: admin|collaborator)")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        message = " ".join(sys.argv[2:]) if len(sys.argv) > 2 else "Auto-generated migration"
        create_migration(message)
    elif command_name == "migrate":
        run_migrations()
    elif command_name == "rollback":
        rollback_migration()
    elif command_name == "current":
        show_current_revision()
    elif command_name == "history":
        show_history()
    elif command_name == "create-tables":
        create_tables()
    elif command_name == "seed":
        seed_demo_data()
    elif command_name == "token" and len(sys.argv) > 2:
        print_token(*sys.argv[2:4])
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
