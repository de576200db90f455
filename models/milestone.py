# models/milestone.py
from sqlmodel import SQLModel, Field
from typing import Optional


class Milestone(SQLModel, table=True):
    __tablename__ = "milestones"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: str
    description: Optional[str] = None
    status: str = Field(default="active")
    sort_order: int = Field(default=0)
