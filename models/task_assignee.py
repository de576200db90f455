# models/task_assignee.py
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional


class TaskAssignee(SQLModel, table=True):
    __tablename__ = "task_assignees"
    __table_args__ = (UniqueConstraint("task_id", "contact_id", name="uq_task_contact"),
                      {"extend_existing": True})

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", index=True)
    contact_id: int = Field(foreign_key="contacts.id")
