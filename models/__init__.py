# models/__init__.py
from .enums import ContactRole, ContactStatus, ContactType, ProjectType, TaskPriority, TaskStatus
from .contact import Contact
from .template import ProjectTemplate, TemplateMilestone, TaskTemplate
from .project import Project
from .milestone import Milestone
from .task import Task
from .task_assignee import TaskAssignee
