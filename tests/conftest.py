"""Pytest configuration and fixtures for docarchive.

Environment is set before any docarchive import so the cached settings,
the rate limiter and the app all see the test configuration. Each test
that asks for the database gets a fresh SQLite file (schema created from
the ORM metadata) and a fresh engine bound to its own event loop.
"""

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="docarchive-tests-"))
_DB_PATH = _TMP_DIR / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STORAGE_ROOT"] = str(_TMP_DIR / "attachments")
os.environ["DATABASE_AUTO_CREATE"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from docarchive.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from docarchive.application.services.category_schema_service import (  # noqa: E402
    CategorySchemaService,
)
from docarchive.application.services.document_value_store import (  # noqa: E402
    DocumentValueStore,
)
from docarchive.application.services.folder_service import FolderService  # noqa: E402
from docarchive.application.use_cases.documents import (  # noqa: E402
    DocumentAggregateService,
)
from docarchive.domain.enums import Role  # noqa: E402
from docarchive.infrastructure.external.storage import (  # noqa: E402
    LocalAttachmentStorage,
)
from docarchive.infrastructure.persistence import database  # noqa: E402
from docarchive.infrastructure.persistence.repositories import (  # noqa: E402
    AttachmentRepository,
    CategoryRepository,
    DocumentRepository,
    FieldDefinitionRepository,
    FieldValueRepository,
    FolderRepository,
)
from docarchive.main import app  # noqa: E402
from docarchive.shared.context import RequestContext  # noqa: E402


@pytest.fixture
async def database_schema() -> AsyncIterator[None]:
    """Create the schema in a fresh SQLite file; dispose the engine and remove the file after."""
    await database.init_models()
    yield
    await database.dispose_engine()
    _DB_PATH.unlink(missing_ok=True)


@pytest.fixture
async def db_session(database_schema: None) -> AsyncIterator[AsyncSession]:
    """Session for service/repository tests. Services only flush; nothing is committed."""
    assert database.AsyncSessionLocal is not None
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(database_schema: None) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(user_id="admin-1", role=Role.ADMINISTRATOR)


@pytest.fixture
def student_ctx() -> RequestContext:
    return RequestContext(user_id="student-1", role=Role.STUDENT)


def identity_headers(user_id: str, role: str) -> dict[str, str]:
    settings = get_settings()
    return {settings.user_id_header: user_id, settings.user_role_header: role}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return identity_headers("admin-1", Role.ADMINISTRATOR.value)


@pytest.fixture
def staff_headers() -> dict[str, str]:
    return identity_headers("staff-1", Role.ADMINISTRATIVE_STAFF.value)


@pytest.fixture
def student_headers() -> dict[str, str]:
    return identity_headers("student-1", Role.STUDENT.value)


@pytest.fixture
def attachment_storage(tmp_path: Path) -> LocalAttachmentStorage:
    return LocalAttachmentStorage(
        str(tmp_path / "attachments"),
        allowed_extensions=frozenset({"pdf", "png"}),
        max_size=1024,
    )


@pytest.fixture
def category_service(db_session: AsyncSession) -> CategorySchemaService:
    return CategorySchemaService(
        CategoryRepository(db_session), FieldDefinitionRepository(db_session)
    )


@pytest.fixture
def folder_service(db_session: AsyncSession) -> FolderService:
    return FolderService(FolderRepository(db_session))


@pytest.fixture
def value_store(db_session: AsyncSession) -> DocumentValueStore:
    return DocumentValueStore(
        FieldDefinitionRepository(db_session), FieldValueRepository(db_session)
    )


def _build_document_service(
    db_session: AsyncSession, storage: object | None = None
) -> DocumentAggregateService:
    field_repo = FieldDefinitionRepository(db_session)
    return DocumentAggregateService(
        category_repo=CategoryRepository(db_session),
        folder_repo=FolderRepository(db_session),
        document_repo=DocumentRepository(db_session),
        field_repo=field_repo,
        value_store=DocumentValueStore(field_repo, FieldValueRepository(db_session)),
        attachment_repo=AttachmentRepository(db_session),
        storage=storage,  # type: ignore[arg-type]
    )


@pytest.fixture
def document_service(
    db_session: AsyncSession, attachment_storage: LocalAttachmentStorage
) -> DocumentAggregateService:
    return _build_document_service(db_session, attachment_storage)


@pytest.fixture
def make_document_service(db_session: AsyncSession):
    """Factory for a DocumentAggregateService on db_session with the given (possibly fake) storage."""

    def _make(storage: object | None = None) -> DocumentAggregateService:
        return _build_document_service(db_session, storage)

    return _make
