"""Backfill users.tenant_code on legacy rows from a user_id,tenant_code CSV.

Run between the migrations that add the nullable tenant_code column and the
one that makes it part of the primary key:

    uv run alembic upgrade c52d9e0f4a61
    uv run python -m scripts.backfill_tenant_codes data/user_tenant_mapping.csv
    uv run alembic upgrade head

Users missing from the CSV get DEFAULT_TENANT_CODE.

Usage:
    uv run python -m scripts.backfill_tenant_codes <csv_path>
All imports use app.*.
"""

import asyncio
import csv
import sys
from pathlib import Path

from app.core.config import get_settings
from app.domain.exceptions import ValidationException
from app.domain.value_objects import TenantCode
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.persistence.repositories import UserIdentityRepository

BATCH_SIZE = 500


def load_tenant_mapping(path: Path) -> dict[str, str]:
    """Read user_id -> tenant_code from a CSV with a user_id,tenant_code header.

    Raises:
        ValidationException: Missing columns or an invalid tenant code.
    """
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames or not {"user_id", "tenant_code"} <= set(reader.fieldnames):
            raise ValidationException("CSV must have user_id and tenant_code columns", "csv")
        mapping: dict[str, str] = {}
        for row in reader:
            user_id = (row["user_id"] or "").strip()
            if not user_id:
                continue
            mapping[user_id] = str(TenantCode((row["tenant_code"] or "").strip()))
        return mapping


async def backfill(
    repo: UserIdentityRepository,
    mapping: dict[str, str],
    default_tenant_code: str,
    batch_size: int = BATCH_SIZE,
) -> tuple[int, int]:
    """Assign tenant codes to every row without one; return (from_csv, defaulted)."""
    from_csv = defaulted = 0
    while True:
        user_ids = await repo.list_missing_tenant(limit=batch_size)
        if not user_ids:
            return from_csv, defaulted
        for user_id in user_ids:
            tenant_code = mapping.get(user_id)
            if tenant_code is None:
                tenant_code = default_tenant_code
                defaulted += 1
            else:
                from_csv += 1
            await repo.backfill_tenant(user_id, tenant_code)


async def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: uv run python -m scripts.backfill_tenant_codes <csv_path>", file=sys.stderr)
        sys.exit(1)
    path = Path(sys.argv[1])
    if not path.is_file():
        print(f"CSV file not found: {path}", file=sys.stderr)
        sys.exit(1)
    mapping = load_tenant_mapping(path)
    settings = get_settings()
    session_factory = get_session_factory()

    async with session_factory() as session:
        async with session.begin():
            repo = UserIdentityRepository(session)
            from_csv, defaulted = await backfill(repo, mapping, settings.default_tenant_code)

    print(f"CSV records loaded: {len(mapping)}")
    print(f"Rows updated from CSV: {from_csv}")
    print(f"Rows defaulted to '{settings.default_tenant_code}': {defaulted}")


if __name__ == "__main__":
    asyncio.run(main())
