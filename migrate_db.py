#!/usr/bin/env python
"""
Database migration script for Aib HUB
PostgreSQL databases are migrated with Alembic; a SQLite dev database created
by the app from the models can be stamped so later migrations apply cleanly.
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

ALEMBIC_INI = Path(__file__).parent / "alembic.ini"


def _alembic_config() -> Config:
    return Config(str(ALEMBIC_INI))


def upgrade_db(revision: str = "head"):
    print(f"Running database migrations to {revision}...")
    command.upgrade(_alembic_config(), revision)
    print("✓ Database migrations completed successfully!")


def downgrade_db(revision: str = "-1"):
    """Downgrade database by one revision (or to specific revision)"""
    print(f"Downgrading database to revision: {revision}")
    command.downgrade(_alembic_config(), revision)
    print("✓ Database downgrade completed!")


def stamp_db(revision: str = "head"):
    """Mark a database whose tables already exist (init_db) as migrated"""
    command.stamp(_alembic_config(), revision)
    print(f"✓ Database stamped at {revision}")


def show_current_revision():
    from aib_hub.db import engine

    script = ScriptDirectory.from_config(_alembic_config())
    with engine.connect() as connection:
        current_rev = MigrationContext.configure(connection).get_current_revision()

    if current_rev:
        print(f"Current database revision: {current_rev}")
    else:
        print("Database is not under migration control. Run 'upgrade', or 'stamp' if init_db created it.")
    print(f"Latest migration available: {script.get_current_head()}")


COMMANDS = {
    "upgrade": upgrade_db,
    "downgrade": downgrade_db,
    "stamp": stamp_db,
    "current": show_current_revision,
}


if __name__ == "__main__":
    name = sys.argv[1] if len(sys.argv) > 1 else "upgrade"
    handler = COMMANDS.get(name)
    if handler is None:
        print("Usage: python migrate_db.py [upgrade [revision]|downgrade [revision]|stamp [revision]|current]")
        sys.exit(1)
    handler(*sys.argv[2:3])
