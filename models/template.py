# models/template.py
from sqlmodel import SQLModel, Field
from typing import Optional

from models.enums import TaskPriority


class ProjectTemplate(SQLModel, table=True):
    __tablename__ = "project_templates"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    meeting_type: Optional[str] = Field(default=None, index=True)  # ProjectType tag
    description: Optional[str] = None


class TemplateMilestone(SQLModel, table=True):
    __tablename__ = "template_milestones"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    template_id: int = Field(foreign_key="project_templates.id", index=True)
    title: str
    description: Optional[str] = None
    sort_order: int = Field(default=0)


class TaskTemplate(SQLModel, table=True):
    __tablename__ = "task_templates"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    template_id: Optional[int] = Field(default=None, foreign_key="project_templates.id", index=True)
    milestone_id: Optional[int] = Field(default=None, foreign_key="template_milestones.id")
    parent_template_id: Optional[int] = Field(default=None, foreign_key="task_templates.id")
    title: str
    description: Optional[str] = None
    priority: str = Field(default=TaskPriority.MEDIUM.value)
    days_from_meeting: int = Field(default=0)  # negative = before the meeting
    based_on_secondary: bool = Field(default=False)  # offset from the DRPM date
    assignee_role: Optional[str] = None  # one role tag or several, comma-separated
    sort_order: int = Field(default=0)
