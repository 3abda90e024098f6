"""Draw sequence planning and the live race engine."""

from .context import (
    AnnounceDraw,
    AnnounceFinisher,
    AnnounceRaceFinished,
    DrawStep,
    Effect,
    Finalization,
    PersistSession,
    RaceContext,
)
from .cursor import DrawCursor
from .errors import (
    ConfigurationError,
    NotStarted,
    RaceFinishedError,
    SequenceExhausted,
    SettlementInconsistency,
    UnresolvedAdjacencyWarning,
)
from .sequence import (
    DEFAULT_MAX_REPAIR_ATTEMPTS,
    default_max_repair_attempts,
    generate_draw_sequence,
)
from .settlement import settle
from .termination import StopReason, evaluate_stop, should_stop
from .tracker import RaceTracker
from .types import DrawSequence, GameMode, GameSession, Player

__all__ = [
    "AnnounceDraw",
    "AnnounceFinisher",
    "AnnounceRaceFinished",
    "ConfigurationError",
    "DEFAULT_MAX_REPAIR_ATTEMPTS",
    "DrawCursor",
    "DrawSequence",
    "DrawStep",
    "Effect",
    "Finalization",
    "GameMode",
    "GameSession",
    "NotStarted",
    "PersistSession",
    "Player",
    "RaceContext",
    "RaceFinishedError",
    "RaceTracker",
    "SequenceExhausted",
    "SettlementInconsistency",
    "StopReason",
    "UnresolvedAdjacencyWarning",
    "default_max_repair_attempts",
    "evaluate_stop",
    "generate_draw_sequence",
    "settle",
    "should_stop",
]
