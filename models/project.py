# models/project.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime, timezone


class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    client_id: Optional[int] = Field(default=None, foreign_key="contacts.id")
    project_type: Optional[str] = None  # ProjectType tag
    template_id: Optional[int] = Field(default=None, foreign_key="project_templates.id")
    meeting_date: Optional[date] = None
    secondary_date: Optional[date] = None  # DRPM date
    status: str = Field(default="active")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
