"""
Postgres schema reference rendered from the ORM metadata.

Shown on the admin dashboard so operators can provision a hosted database
by hand; the application itself creates tables through ``init_db``.
"""

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from .models import Base

INCREMENT_GENERATIONS_SQL = """
-- Atomic usage counter bump
create or replace function increment_generations(target_id varchar)
returns integer
language sql
as $$
  update profiles
     set generations_count = coalesce(generations_count, 0) + 1
   where id = target_id
  returning generations_count;
$$;
"""


def render_schema_sql() -> str:
    """Return CREATE TABLE / CREATE INDEX statements plus helper functions."""
    dialect = postgresql.dialect()
    parts: list[str] = []
    for table in Base.metadata.sorted_tables:
        parts.append(f"-- {table.name}")
        parts.append(str(CreateTable(table).compile(dialect=dialect)).strip() + ";")
        for index in sorted(table.indexes, key=lambda i: i.name or ""):
            parts.append(str(CreateIndex(index).compile(dialect=dialect)).strip() + ";")
    parts.append(INCREMENT_GENERATIONS_SQL.strip())
    return "\n\n".join(parts) + "\n"
