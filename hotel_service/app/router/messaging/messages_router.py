from typing import List
from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_auth_db, get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.messaging import messages_crud as crud
from ...schemas.messaging.messages_schemas import (
    ChatUser, ConversationCreate, ConversationMessages, ConversationOut, MessageCreate, MessageOut
)

router = APIRouter(prefix="/api/messages", tags=["Messaging"])


@router.get("/users", response_model=List[ChatUser])
def get_chattable_users_endpoint(
    auth_db: Session = Depends(get_auth_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_chattable_users(auth_db, current_user)


@router.get("/conversations", response_model=List[ConversationOut])
def get_conversations_endpoint(
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_conversations(db, auth_db, current_user)


@router.post("/conversations", response_model=ConversationOut)
def get_or_create_conversation_route(
    request: ConversationCreate,
    db: Session = Depends(get_db),
    auth_db: Session = Depends(get_auth_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_or_create_conversation(db, auth_db, current_user, request.participant_id)


@router.get("/conversations/{conversation_id}", response_model=ConversationMessages)
def get_messages_endpoint(
    conversation_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_messages(db, current_user, conversation_id)


@router.post("/conversations/{conversation_id}/messages", response_model=MessageOut)
def send_message_route(
    conversation_id: UUID,
    message: MessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.send_message(background_tasks, db, current_user, conversation_id, message)
