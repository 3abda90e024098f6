from __future__ import annotations

import sys

from alembic.autogenerate import compare_metadata
from alembic.runtime.migration import MigrationContext
from sqlalchemy.exc import SQLAlchemyError

from winniluck.db.engine import make_engine
from winniluck.models import Base


def main() -> int:
    """Compare the live schema with the ORM models.

    Exit status is 0 when they match, 1 when differences exist and 2 when
    the database cannot be inspected.
    """
    engine = make_engine()
    url_display = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as connection:
            context = MigrationContext.configure(
                connection=connection, opts={"compare_type": True}
            )
            diffs = compare_metadata(context, Base.metadata)
    except SQLAlchemyError as exc:
        print(f"Schema drift check: ERROR for {url_display}: {exc}", file=sys.stderr)
        return 2

    if not diffs:
        print(f"Schema drift check: OK for {url_display}.")
        return 0
    print(f"Schema drift check: {len(diffs)} difference(s) for {url_display}:")
    for diff in diffs:
        print(f"  - {diff}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
