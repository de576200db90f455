# models/contact.py
from sqlmodel import SQLModel, Field
from typing import Optional

from models.enums import ContactStatus, ContactType


class Contact(SQLModel, table=True):
    __tablename__ = "contacts"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    email: Optional[str] = Field(default=None, index=True)
    contact_type: str = Field(default=ContactType.CLIENT.value, index=True)
    role: Optional[str] = None  # ContactRole tag, team members only
    status: str = Field(default=ContactStatus.ACTIVE.value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
