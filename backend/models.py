from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

Category = Literal["work", "life"]
Priority = Literal["low", "medium", "high"]


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("title must not be blank")
    return value


class Task(BaseModel):
    id: str
    title: str
    category: Category = "work"
    priority: Priority = "medium"
    completed: bool = False
    due_date: Optional[date] = None  # ISO format: YYYY-MM-DD
    created_at: str  # ISO format datetime string


class TaskCreate(BaseModel):
    title: str
    category: Category = "work"
    priority: Priority = "medium"
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _clean_title(value)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[Category] = None
    priority: Optional[Priority] = None
    completed: Optional[bool] = None
    due_date: Optional[date] = None  # explicit null clears the due date

    # Omitted fields stay unchanged; only due_date may be cleared with null
    @field_validator("title", "category", "priority", "completed", mode="before")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value)


class ExtractionResult(BaseModel):
    """Structured fields pulled out of a free-text message."""
    raw_text: str
    title: str
    category: Category = "work"
    priority: Priority = "medium"
    due_date: Optional[date] = None
    is_empty: bool = False


class SmsMessage(BaseModel):
    text: Optional[str] = None


class SmsResult(BaseModel):
    created: bool
    message: str
    extraction: ExtractionResult
    task: Optional[Task] = None


class CategorySummary(BaseModel):
    total: int = 0
    active: int = 0
    completed: int = 0
