"""Seed dev data (categories with fields, folders) from scripts/seed-data.json.

Existing categories and folders (same name / label) are skipped, so the
script can be re-run.

Usage:
    python -m scripts.seed_dev_data [path/to/seed-data.json]

Requires: DATABASE_URL. With SQLite the schema is created when missing;
Postgres databases must be migrated first (alembic upgrade head).
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from docarchive.application.dtos.category import FieldDefinitionCreate
from docarchive.application.services.category_schema_service import (
    CategorySchemaService,
)
from docarchive.application.services.folder_service import FolderService
from docarchive.core.config import get_settings
from docarchive.domain.exceptions import ConflictException
from docarchive.infrastructure.persistence.repositories import (
    CategoryRepository,
    FieldDefinitionRepository,
    FolderRepository,
)
from docarchive.shared.context import RequestContext


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def run(path: Path) -> None:
    _load_env()
    get_settings.cache_clear()
    data = json.loads(path.read_text(encoding="utf-8"))

    from docarchive.infrastructure.persistence import database as db_mod

    if get_settings().is_sqlite:
        await db_mod.init_models()
    db_mod._ensure_engine()
    assert db_mod.AsyncSessionLocal is not None

    ctx = RequestContext.system()
    async with db_mod.AsyncSessionLocal() as session:
        async with session.begin():
            categories = CategorySchemaService(
                CategoryRepository(session), FieldDefinitionRepository(session)
            )
            folders = FolderService(FolderRepository(session))

            for c in data.get("categories", []):
                if await categories.category_repo.name_taken(c["name"]):
                    print(f"  Skip category {c['name']}: already exists")
                    continue
                created = await categories.create_category(
                    ctx,
                    c["name"],
                    description=c.get("description"),
                    fields=[
                        FieldDefinitionCreate(
                            name=f["name"],
                            field_type=f["type"],
                            required=f.get("required", False),
                            display_order=f.get("order", 1),
                            max_length=f.get("max_length"),
                        )
                        for f in c.get("fields", [])
                    ],
                )
                print(f"  Category {created.name} -> {created.id} ({len(created.fields)} fields)")

            for f in data.get("folders", []):
                try:
                    folder = await folders.create_folder(
                        ctx,
                        f["number"],
                        f["label"],
                        title=f.get("title"),
                        description=f.get("description"),
                    )
                    print(f"  Folder {folder.label} -> {folder.id}")
                except ConflictException as e:
                    print(f"  Skip folder {f['label']}: {e.message}", file=sys.stderr)

    await db_mod.dispose_engine()
    print("Seed completed.")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
