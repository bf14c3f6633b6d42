"""Schedule board: document model, storage, and mutation rules."""

from escala.board.errors import BoardError
from escala.board.models import ScheduleDocument
from escala.board.service import ScheduleBoard
from escala.board.store import DocumentStore

__all__ = [
    "BoardError",
    "DocumentStore",
    "ScheduleBoard",
    "ScheduleDocument",
]
