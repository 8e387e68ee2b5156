"""Chat booking-flow state routes.

The chat front end keeps its progress here between turns. State is held
in memory by the ``ConversationStateStore`` created at startup.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.core.responses import success_response
from app.schemas.chatbot import ConversationStateUpdate
from app.services.conversation_state import ConversationStateStore

router = APIRouter()


def get_conversation_store(request: Request) -> ConversationStateStore:
    return request.app.state.conversation_store


ConversationStore = Annotated[ConversationStateStore, Depends(get_conversation_store)]


@router.get("/state/{chat_id}")
def get_state(chat_id: str, store: ConversationStore):
    return success_response(store.get(chat_id).to_dict())


@router.post("/state/{chat_id}")
def save_state(chat_id: str, body: ConversationStateUpdate, store: ConversationStore):
    state = store.set(chat_id, body.step, body.data)
    return success_response(state.to_dict(), message="State saved")


@router.delete("/state/{chat_id}")
def clear_state(chat_id: str, store: ConversationStore):
    store.clear(chat_id)
    return success_response(message="State cleared")
