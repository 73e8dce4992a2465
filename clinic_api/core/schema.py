"""Startup schema reconciliation.

Brings a live database up to the shape the running code expects without a
migration framework. Every statement is additive and a no-op when its target
already exists, so the routine can run on every boot, including from several
instances starting at once.

Each statement runs in its own transaction. A failing statement is logged and
recorded in the report and the remaining steps still run; only the column
additions of a table that could not be created (and does not exist) are
skipped. ``reconcile_schema`` never raises.
"""

from dataclasses import dataclass, field
from functools import partial

import structlog
from sqlalchemy import Column, Table, case, inspect, insert, literal_column, select, text, true
from sqlalchemy.engine import Connection, Dialect
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql.elements import TextClause

from clinic_api.models import appointment_mirror, appointments, metadata

logger = structlog.get_logger()

# Unique constraints shipped by earlier deployments that must go.
# (table, constraint name, constrained columns)
LEGACY_UNIQUE_CONSTRAINTS: list[tuple[str, str, tuple[str, ...]]] = [
    # Several users may share a role
    ("users", "users_role_key", ("role",)),
]


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation pass."""

    applied: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no statement failed."""
        return not self.failed

    @property
    def added_columns(self) -> list[str]:
        """Columns added during this pass, as ``table.column``."""
        return [step.split(":", 1)[1] for step in self.applied if step.startswith("add_column:")]


def _quote(dialect: Dialect, name: str) -> str:
    return dialect.identifier_preparer.quote(name)


def _default_sql(column: Column, dialect: Dialect) -> str | None:
    if column.server_default is None:
        return None
    arg = column.server_default.arg  # type: ignore[attr-defined]
    if isinstance(arg, str):
        return "'" + arg.replace("'", "''") + "'"
    if isinstance(arg, TextClause):
        return arg.text
    return str(arg.compile(dialect=dialect))


def add_column_ddl(table: Table, column: Column, dialect: Dialect) -> str:
    """Render ``ALTER TABLE ... ADD COLUMN`` for a column added after the table.

    Uniqueness is left out; SQLite cannot add a UNIQUE column, so the caller
    enforces it with a separate unique index.
    """
    if_not_exists = "IF NOT EXISTS " if dialect.name == "postgresql" else ""
    ddl = (
        f"ALTER TABLE {_quote(dialect, table.name)} "
        f"ADD COLUMN {if_not_exists}{_quote(dialect, column.name)} "
        f"{column.type.compile(dialect=dialect)}"
    )
    default = _default_sql(column, dialect)
    if default is not None:
        ddl += f" DEFAULT {default}"
    return ddl


def unique_index_ddl(table: Table, column: Column, dialect: Dialect) -> str:
    """Render an idempotent unique index enforcing a column's uniqueness."""
    index_name = f"uq_{table.name}_{column.name}"
    return (
        f"CREATE UNIQUE INDEX IF NOT EXISTS {_quote(dialect, index_name)} "
        f"ON {_quote(dialect, table.name)} ({_quote(dialect, column.name)})"
    )


def drop_constraint_ddl(table_name: str, constraint_name: str, dialect: Dialect) -> str:
    """Render a guarded constraint drop (PostgreSQL syntax)."""
    return (
        f"ALTER TABLE {_quote(dialect, table_name)} "
        f"DROP CONSTRAINT IF EXISTS {_quote(dialect, constraint_name)}"
    )


def _column_names(sync_conn: Connection, table_name: str) -> set[str] | None:
    inspector = inspect(sync_conn)
    if not inspector.has_table(table_name):
        return None
    return {column["name"] for column in inspector.get_columns(table_name)}


def _unique_constraints(sync_conn: Connection, table_name: str) -> list[dict]:
    inspector = inspect(sync_conn)
    if not inspector.has_table(table_name):
        return []
    return list(inspector.get_unique_constraints(table_name))


def _unique_columns(sync_conn: Connection, table_name: str) -> set[tuple[str, ...]]:
    """Column sets already covered by a unique constraint or unique index."""
    inspector = inspect(sync_conn)
    if not inspector.has_table(table_name):
        return set()
    covered = {
        tuple(uc.get("column_names") or ())
        for uc in inspector.get_unique_constraints(table_name)
    }
    covered.update(
        tuple(ix.get("column_names") or ())
        for ix in inspector.get_indexes(table_name)
        if ix.get("unique")
    )
    return covered


async def _execute(
    engine: AsyncEngine, report: ReconcileReport, step: str, render, *args
) -> bool:
    """Render and run one statement in its own transaction, recording the outcome."""
    try:
        statement = render(*args)
        if isinstance(statement, str):
            statement = text(statement)
        async with engine.begin() as conn:
            await conn.execute(statement)
    except Exception as e:
        logger.warning("schema_statement_failed", step=step, error=str(e))
        report.failed.append((step, str(e)))
        return False

    report.applied.append(step)
    return True


async def _inspect(engine: AsyncEngine, report: ReconcileReport, step: str, fn, table_name: str):
    try:
        async with engine.connect() as conn:
            return True, await conn.run_sync(fn, table_name)
    except Exception as e:
        logger.warning("schema_inspection_failed", step=step, error=str(e))
        report.failed.append((step, str(e)))
        return False, None


async def _reconcile_table(engine: AsyncEngine, table: Table, report: ReconcileReport) -> None:
    dialect = engine.dialect

    await _execute(
        engine,
        report,
        f"create_table:{table.name}",
        partial(CreateTable, table, if_not_exists=True),
    )

    inspected, existing = await _inspect(
        engine, report, f"inspect_columns:{table.name}", _column_names, table.name
    )
    if not inspected:
        return
    if existing is None:
        logger.warning("schema_table_missing", table=table.name)
        report.skipped.append(f"add_columns:{table.name}")
        return

    for column in table.columns:
        if not column.info.get("added_later") or column.name in existing:
            continue
        added = await _execute(
            engine,
            report,
            f"add_column:{table.name}.{column.name}",
            add_column_ddl,
            table,
            column,
            dialect,
        )
        if added:
            existing.add(column.name)

    # Checked on every pass: an index that failed after its column was added
    # is still created on a later boot
    unique_late = [
        column
        for column in table.columns
        if column.info.get("added_later") and column.unique and column.name in existing
    ]
    if not unique_late:
        return

    _, covered = await _inspect(
        engine, report, f"inspect_unique:{table.name}", _unique_columns, table.name
    )
    for column in unique_late:
        if covered and (column.name,) in covered:
            continue
        await _execute(
            engine,
            report,
            f"unique_index:{table.name}.{column.name}",
            unique_index_ddl,
            table,
            column,
            dialect,
        )


async def _drop_legacy_constraint(
    engine: AsyncEngine,
    report: ReconcileReport,
    table_name: str,
    constraint_name: str,
    columns: tuple[str, ...],
) -> None:
    dialect = engine.dialect
    step = f"drop_constraint:{table_name}.{constraint_name}"

    if dialect.name == "postgresql":
        # IF EXISTS keeps an already-migrated database from erroring
        await _execute(
            engine,
            report,
            step,
            drop_constraint_ddl,
            table_name,
            constraint_name,
            dialect,
        )
        return

    inspected, constraints = await _inspect(
        engine, report, f"inspect_constraints:{table_name}", _unique_constraints, table_name
    )
    if not inspected:
        return

    present = any(
        uc.get("name") == constraint_name or tuple(uc.get("column_names") or ()) == columns
        for uc in constraints
    )
    if present:
        logger.warning(
            "legacy_constraint_not_dropped",
            table=table_name,
            constraint=constraint_name,
            dialect=dialect.name,
            reason="dialect cannot drop constraints in place",
        )
        report.skipped.append(step)


async def reconcile_schema(engine: AsyncEngine) -> ReconcileReport:
    """
    Create missing tables and columns and remove legacy constraints.

    Args:
        engine: Engine whose pool supplies one connection per statement

    Returns:
        Report of applied, failed and skipped steps
    """
    report = ReconcileReport()

    for table in metadata.sorted_tables:
        await _reconcile_table(engine, table, report)

    for table_name, constraint_name, columns in LEGACY_UNIQUE_CONSTRAINTS:
        await _drop_legacy_constraint(engine, report, table_name, constraint_name, columns)

    if report.ok:
        logger.info(
            "database_schema_ensured",
            added_columns=report.added_columns,
            skipped=report.skipped,
        )
    else:
        logger.warning(
            "database_schema_partially_ensured",
            failed=[step for step, _ in report.failed],
            skipped=report.skipped,
        )

    return report


async def backfill_appointment_mirror(engine: AsyncEngine) -> int:
    """
    Insert a mirror row for every appointment that has none.

    Covers appointments written before mirroring existed or whose mirror
    insert failed. Safe to repeat.

    Returns:
        Number of mirror rows inserted (0 on failure)
    """
    status = case(
        (appointments.c.done == true(), literal_column("'done'")),
        else_=literal_column("'pending'"),
    )
    mirrored = select(appointment_mirror.c.appointment_id).where(
        appointment_mirror.c.appointment_id.is_not(None)
    )
    source = select(
        appointments.c.patient,
        appointments.c.date,
        appointments.c.time,
        status,
        appointments.c.id,
    ).where(appointments.c.id.not_in(mirrored))

    stmt = insert(appointment_mirror).from_select(
        ["full_name", "date", "time", "status", "appointment_id"],
        source,
    )

    try:
        async with engine.begin() as conn:
            result = await conn.execute(stmt)
    except Exception as e:
        logger.warning("appointment_mirror_backfill_failed", error=str(e))
        return 0

    inserted = max(result.rowcount or 0, 0)
    logger.info("appointment_mirror_backfilled", rows=inserted)
    return inserted
