from pydantic import BaseModel, ConfigDict, Field, StrictStr
from typing import Literal, Optional

class Task(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    created_at: str = Field(alias="createdAt")  # ISO format datetime string (UTC)

class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: StrictStr = Field(min_length=1)
    due_date: Optional[StrictStr] = Field(default=None, alias="dueDate")

class Command(BaseModel):
    type: Literal["add", "list", "none"]
    title: Optional[str] = None
    due_date: Optional[str] = None

class ChatRequest(BaseModel):
    user_id: StrictStr = Field(alias="userId")
    message: StrictStr
