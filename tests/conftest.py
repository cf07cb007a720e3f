import pytest
import pytest_asyncio

from api.features.conversation.service import ConversationStore
from api.shared.entities.registry import BaseEntity
from infra.resources import DatabaseResource


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'conversations.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    db = DatabaseResource(database_url=database_url)
    await db.init()
    await db.create_schema(BaseEntity)
    yield db
    await db.shutdown()


@pytest.fixture
def store(database):
    return ConversationStore(database)
