from datetime import datetime
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, Field


class ChatUser(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class ConversationCreate(BaseModel):
    participant_id: UUID


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class MessageOut(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    recipient_id: UUID
    content: str
    read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ConversationOut(BaseModel):
    id: UUID
    participant: Optional[ChatUser] = None
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    unread_count: int = 0
    created_at: Optional[datetime] = None


class ConversationMessages(BaseModel):
    conversation_id: UUID
    messages: List[MessageOut]
