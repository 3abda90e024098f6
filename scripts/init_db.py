from __future__ import annotations

import argparse
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from winniluck.storage import open_store

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def upgrade_db(target_revision: str = "head") -> None:
    """Run the race table migrations up to ``target_revision``."""
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def main() -> None:
    """Migrate the configured database and make sure game modes exist."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--revision", default="head", help="Alembic target revision")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    upgrade_db(args.revision)

    store = open_store()
    modes = store.fetch_game_modes()
    print("Game modes:", ", ".join(mode.title for mode in modes) or "(none)")
    for name, count in store.storage_info().items():
        print(f"  {name}: {count}")


if __name__ == "__main__":
    main()
