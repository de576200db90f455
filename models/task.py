# models/task.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date

from models.enums import TaskPriority, TaskStatus


class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    milestone_id: Optional[int] = Field(default=None, foreign_key="milestones.id")
    parent_task_id: Optional[int] = Field(default=None, foreign_key="tasks.id", index=True)
    title: str
    description: Optional[str] = None
    priority: str = Field(default=TaskPriority.MEDIUM.value)
    status: str = Field(default=TaskStatus.TODO.value)
    due_date: Optional[date] = None
    assigned_to: Optional[int] = Field(default=None, foreign_key="contacts.id")  # first assignee; all of them live in task_assignees
    assigned_to_role: Optional[str] = None  # comma-separated roles still waiting for a team member
    sort_order: int = Field(default=0)
    level: int = Field(default=0)

    # offset rule kept so due dates can be recomputed when the meeting moves
    days_from_meeting: Optional[int] = None
    based_on_secondary: bool = Field(default=False)
