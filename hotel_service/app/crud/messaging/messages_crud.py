import logging
import time
from datetime import datetime, timezone
from typing import List
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from shared.core.schemas import UserToken
from shared.models.users import Users
from shared.utils.enums import ELEVATED_ROLES
from ...models.messaging.conversations import Conversation, Message
from ...schemas.messaging.messages_schemas import (
    ChatUser, ConversationMessages, ConversationOut, MessageCreate, MessageOut
)
from ..system.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

MAX_CONVERSATION_ATTEMPTS = 3
RETRY_BACKOFF_SECONDS = 0.05


def ordered_pair(first: UUID, second: UUID) -> tuple[UUID, UUID]:
    return (first, second) if str(first) < str(second) else (second, first)


def can_chat(sender_role: str, recipient_role: str) -> bool:
    """Front-desk staff talk to anyone; everybody else only to front-desk staff."""
    return sender_role in ELEVATED_ROLES or recipient_role in ELEVATED_ROLES


def _find_conversation(db: Session, pair: tuple[UUID, UUID]):
    return db.query(Conversation).filter(
        Conversation.participant_a == pair[0],
        Conversation.participant_b == pair[1],
    ).first()


def _conversation_out(conversation: Conversation, me: UUID, users: dict, unread: dict) -> ConversationOut:
    other = users.get(conversation.other_participant(me))
    return ConversationOut(
        id=conversation.id,
        participant=ChatUser.model_validate(other) if other else None,
        last_message=conversation.last_message,
        last_message_at=conversation.last_message_at,
        unread_count=unread.get(conversation.id, 0),
        created_at=conversation.created_at,
    )


def get_or_create_conversation(
        db: Session,
        auth_db: Session,
        current_user: UserToken,
        participant_id: UUID) -> ConversationOut:
    me = UUID(current_user.user_id)
    if participant_id == me:
        raise ValidationError("Cannot start a conversation with yourself")

    participant = auth_db.query(Users).filter(
        Users.id == participant_id, Users.is_active == True).first()
    if not participant:
        raise NotFoundError("User not found")
    if not can_chat(current_user.role, participant.role):
        raise AuthorizationError("You can only message hotel staff")

    pair = ordered_pair(me, participant_id)
    users = {participant.id: participant}

    # Optimistic insert; a concurrent request may create the same pair first
    for attempt in range(1, MAX_CONVERSATION_ATTEMPTS + 1):
        conversation = _find_conversation(db, pair)
        if conversation:
            return _conversation_out(conversation, me, users, {})

        conversation = Conversation(participant_a=pair[0], participant_b=pair[1])
        db.add(conversation)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Conversation created concurrently, retry %s", attempt)
            time.sleep(RETRY_BACKOFF_SECONDS * attempt)
            continue

        db.refresh(conversation)
        return _conversation_out(conversation, me, users, {})

    conversation = _find_conversation(db, pair)
    if not conversation:
        raise ConflictError("Could not create conversation, please try again")
    return _conversation_out(conversation, me, users, {})


def _get_own_conversation(db: Session, me: UUID, conversation_id: UUID) -> Conversation:
    conversation = db.query(Conversation).filter(
        Conversation.id == conversation_id).first()
    if not conversation:
        raise NotFoundError("Conversation not found")
    if not conversation.has_participant(me):
        raise AuthorizationError("Not a participant of this conversation")
    return conversation


def send_message(
        background_tasks: BackgroundTasks,
        db: Session,
        current_user: UserToken,
        conversation_id: UUID,
        message: MessageCreate) -> MessageOut:
    me = UUID(current_user.user_id)
    conversation = _get_own_conversation(db, me, conversation_id)

    content = message.content.strip()
    if not content:
        raise ValidationError("Message content is required")

    db_message = Message(
        conversation_id=conversation.id,
        sender_id=me,
        recipient_id=conversation.other_participant(me),
        content=content,
    )
    db.add(db_message)
    conversation.last_message = content[:500]
    conversation.last_message_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(db_message)

    Dispatcher(background_tasks).message_received(
        db_message, current_user.name or current_user.email or "Someone")
    return MessageOut.model_validate(db_message)


def get_messages(db: Session, current_user: UserToken, conversation_id: UUID) -> ConversationMessages:
    me = UUID(current_user.user_id)
    conversation = _get_own_conversation(db, me, conversation_id)

    db.query(Message).filter(
        Message.conversation_id == conversation.id,
        Message.recipient_id == me,
        Message.read == False,
    ).update({Message.read: True, Message.read_at: datetime.now(timezone.utc)},
             synchronize_session=False)
    db.commit()

    messages = db.query(Message).filter(
        Message.conversation_id == conversation.id
    ).order_by(Message.created_at.asc()).all()
    return ConversationMessages(
        conversation_id=conversation.id,
        messages=[MessageOut.model_validate(m) for m in messages],
    )


def get_conversations(db: Session, auth_db: Session, current_user: UserToken) -> List[ConversationOut]:
    me = UUID(current_user.user_id)
    conversations = db.query(Conversation).filter(
        or_(Conversation.participant_a == me, Conversation.participant_b == me)
    ).all()
    if not conversations:
        return []

    other_ids = [c.other_participant(me) for c in conversations]
    users = {u.id: u for u in auth_db.query(Users).filter(Users.id.in_(other_ids)).all()}
    unread = dict(
        db.query(Message.conversation_id, func.count(Message.id))
        .filter(Message.recipient_id == me, Message.read == False)
        .group_by(Message.conversation_id)
        .all()
    )

    conversations.sort(
        key=lambda c: c.last_message_at or c.created_at or datetime.min, reverse=True)
    return [_conversation_out(c, me, users, unread) for c in conversations]


def get_chattable_users(auth_db: Session, current_user: UserToken) -> List[ChatUser]:
    query = auth_db.query(Users).filter(
        Users.is_active == True,
        Users.id != UUID(current_user.user_id),
    )
    if current_user.role not in ELEVATED_ROLES:
        query = query.filter(Users.role.in_(list(ELEVATED_ROLES)))
    return [ChatUser.model_validate(u) for u in query.order_by(Users.first_name.asc()).all()]
