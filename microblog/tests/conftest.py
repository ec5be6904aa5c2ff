import os
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

# Point the app at a throwaway sqlite file before anything imports microblog.models
_DB_DIR = Path(tempfile.mkdtemp(prefix='microblog-tests-'))
os.environ['DATABASE_URL'] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
# cheap hashes keep the suite fast
os.environ.setdefault('ARGON2_TIME_COST', '1')
os.environ.setdefault('ARGON2_MEMORY_COST', '1024')
os.environ.setdefault('ARGON2_PARALLELISM', '1')

from microblog.models import init_models  # noqa: E402
from microblog.models.users import User  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Fresh schema for every test that touches the database."""
    await init_models(drop=True)
    yield


@pytest.fixture
def new_user():
    return User(
        name='Example User',
        email='user@example.com',
        password='foobar',
        password_confirmation='foobar',
    )
