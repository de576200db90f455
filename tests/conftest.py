# tests/conftest.py
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

import db
from models.contact import Contact
from models.template import TaskTemplate


@pytest.fixture
def memory_db(monkeypatch):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    monkeypatch.setattr(db, "engine", engine)
    yield engine
    engine.dispose()


@pytest.fixture
def tt():
    """Build an unsaved TaskTemplate with an explicit id."""
    def _make(id, title=None, parent=None, days=0, secondary=False, role=None, sort=0, milestone=None):
        return TaskTemplate(id=id, title=title or f"Task {id}", parent_template_id=parent,
                            days_from_meeting=days, based_on_secondary=secondary,
                            assignee_role=role, sort_order=sort, milestone_id=milestone)
    return _make


@pytest.fixture
def member():
    def _make(id, first, last, role, status="active"):
        return Contact(id=id, first_name=first, last_name=last, contact_type="team_member",
                       role=role, status=status)
    return _make
