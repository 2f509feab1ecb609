"""
Generic upsert helper with IS DISTINCT FROM optimization.

Used by the calendar writer. Rows are only rewritten when one
of the watched columns actually changed, so updated_at keeps meaning
"last real change".
"""

from functools import reduce
from operator import or_
from typing import Any

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.engine import Connection


def upsert_with_distinct_check(
    conn: Connection,
    table: type,
    rows: list[dict[str, Any]],
    conflict_columns: list[str],
    distinct_columns: list[str],
    touch_column: str | None = "updated_at",
) -> int:
    """
    Perform upsert with IS DISTINCT FROM optimization.

    Args:
        conn: Active database connection (within transaction)
        table: SQLAlchemy ORM table class (e.g., DailyOverrideRow)
        rows: List of row dicts to upsert
        conflict_columns: Columns of the unique constraint used for ON CONFLICT
        distinct_columns: Columns copied on conflict and compared for changes
        touch_column: Timestamp column set to the incoming value on update, or None

    Returns:
        int: Number of rows inserted or updated

    Example:
        >>> with engine.begin() as conn:
        ...     upsert_with_distinct_check(
        ...         conn=conn,
        ...         table=DailyOverrideRow,
        ...         rows=[{"id": uuid4(), "listing_id": ..., "date": ..., "price": ...}],
        ...         conflict_columns=["listing_id", "date"],
        ...         distinct_columns=["price", "is_available"],
        ...     )
    """
    if not rows:
        return 0

    stmt = insert(table).values(rows)

    set_dict = {col: getattr(stmt.excluded, col) for col in distinct_columns}
    if touch_column is not None:
        set_dict[touch_column] = getattr(stmt.excluded, touch_column)

    distinct_check = reduce(
        or_,
        [
            getattr(table, col).is_distinct_from(getattr(stmt.excluded, col))
            for col in distinct_columns
        ],
    )

    stmt = stmt.on_conflict_do_update(
        index_elements=conflict_columns,
        set_=set_dict,
        where=distinct_check,
    )

    result = conn.execute(stmt)
    return result.rowcount
