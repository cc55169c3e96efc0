"""
Task Model.

Tasks have no backend table; they live in ``TaskService`` only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from issuelane.models.enums import Priority, TaskStatus
from issuelane.models.ticket import PersonRef


class Task(BaseModel):
    """A work item on the tasks board."""

    id: str
    title: str
    description: str = ""
    status: TaskStatus
    priority: Priority
    project: str
    assignee: PersonRef
    created_at: datetime
    updated_at: datetime
    due_date: Optional[datetime] = None
    progress: int = Field(default=0, ge=0, le=100)
    estimated_hours: float = Field(default=0, ge=0)
    logged_hours: float = Field(default=0, ge=0)

    model_config = {"validate_assignment": True}
