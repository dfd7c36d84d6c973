"""Alembic command shortcuts, exposed as console scripts in pyproject.toml."""

import subprocess
import sys

from src.platform.constant.path import ALEMBIC_INI


def run_alembic(args: list[str]) -> int:
    return subprocess.call(['alembic', '-c', str(ALEMBIC_INI), *args])


def upgrade() -> int:
    return run_alembic(['upgrade', 'head'])


def downgrade() -> int:
    return run_alembic(['downgrade', '-1'])


def make_migration() -> int:
    if len(sys.argv) < 2:
        print("Usage: make-migration 'migration message'")
        return 1
    return run_alembic(['revision', '--autogenerate', '-m', ' '.join(sys.argv[1:])])
