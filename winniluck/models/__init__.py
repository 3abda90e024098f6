from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .game_mode import GameModeRecord  # noqa: F401
from .player import PlayerRecord  # noqa: F401
from .game_session import GameSessionRecord  # noqa: F401

__all__ = [
    "Base",
    "GameModeRecord",
    "PlayerRecord",
    "GameSessionRecord",
]
