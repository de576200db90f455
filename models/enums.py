# models/enums.py
from enum import Enum
from typing import Optional


class _Tag(str, Enum):
    """String tag with an OTHER member that absorbs values we don't know yet."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            v = value.strip().lower()
            for member in cls:
                if member.value == v:
                    return member
        return cls.OTHER

    @classmethod
    def coerce(cls, value, default: Optional["_Tag"] = None):
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        return cls(value)

    @classmethod
    def choices(cls) -> list[str]:
        return [m.value for m in cls]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class ContactRole(_Tag):
    ACCOUNTANT = "accountant"
    ADMIN_ASSISTANT = "admin_assistant"
    CLIENT_SERVICE_REP = "client_service_rep"
    DELIVERABLES_TEAM_COORDINATOR = "deliverables_team_coordinator"
    ESTATE_ATTORNEY = "estate_attorney"
    FINANCIAL_PLANNER = "financial_planner"
    HUMAN_RELATIONS = "human_relations"
    INSURANCE_BUSINESS = "insurance_business"
    INSURANCE_HEALTH = "insurance_health"
    INSURANCE_LIFE_LTC_DISABILITY = "insurance_life_ltc_disability"
    INSURANCE_PC = "insurance_pc"
    MONEY_MANAGER = "money_manager"
    TAX_PLANNER = "tax_planner"
    TRUSTED_ADVISOR = "trusted_advisor"
    OTHER = "other"


class ContactStatus(_Tag):
    ACTIVE = "active"
    INACTIVE = "inactive"
    FOLLOW_UP = "follow_up"
    CONVERTED = "converted"
    OTHER = "other"


class ContactType(_Tag):
    CLIENT = "client"
    PROSPECT = "prospect"
    TEAM_MEMBER = "team_member"
    STRATEGIC_PARTNER = "strategic_partner"
    OTHER = "other"


class TaskStatus(_Tag):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    OTHER = "other"


class TaskPriority(_Tag):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    OTHER = "other"


class ProjectType(_Tag):
    FRM = "frm"  # Financial Road Map interview
    IM = "im"    # Implementation Meeting
    IPU = "ipu"  # Initial Progress Update
    CSR = "csr"  # Comprehensive Safety Review
    GPO = "gpo"  # Goals Progress Update
    TAR = "tar"  # The Annual Review
    OTHER = "other"
