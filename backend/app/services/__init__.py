# Services module

from app.services.conversation_state import ConversationState, ConversationStateStore
from app.services.reservations_service import ReservationService
from app.services.review_service import OfferService, ReviewService
from app.services.table_service import TableService

__all__ = [
    "ConversationState",
    "ConversationStateStore",
    "ReservationService",
    "ReviewService",
    "OfferService",
    "TableService",
]
