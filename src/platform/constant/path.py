from pathlib import Path


# Repository root (holds .env, logs/ and the src package)
PROJECT_ROOT = Path(__file__).resolve().parents[3]

LOG_DIR = PROJECT_ROOT / 'logs'

ENV_FILE = PROJECT_ROOT / '.env'
ENV_EXAMPLE_FILE = PROJECT_ROOT / '.env.example'

# Migrations live next to the platform code, not at the root
ALEMBIC_DIR = PROJECT_ROOT / 'src' / 'platform' / 'alembic'
ALEMBIC_INI = ALEMBIC_DIR / 'alembic.ini'
