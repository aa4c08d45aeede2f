"""
Todo Models - Pydantic schemas for agent work plans and todos.

A work plan groups the todos generated for one goal. Todos carry
their own status, priority, time estimate and tags.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def new_id() -> str:
	"""Generate a short opaque identifier."""
	return uuid.uuid4().hex[:12]


class PlanStatus(str, Enum):
	"""Status of a work plan."""
	PENDING = "pending"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"
	FAILED = "failed"


class TodoStatus(str, Enum):
	"""Status of a single todo."""
	PENDING = "pending"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"
	FAILED = "failed"
	BLOCKED = "blocked"


class TodoPriority(str, Enum):
	"""Priority of a todo, ordered critical > high > medium > low."""
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"
	CRITICAL = "critical"

	@property
	def rank(self) -> int:
		return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
	TodoPriority.LOW: 1,
	TodoPriority.MEDIUM: 2,
	TodoPriority.HIGH: 3,
	TodoPriority.CRITICAL: 4,
}


class TodoContext(BaseModel):
	"""Extra context attached to a todo at planning time."""
	reasoning: str = Field(default="")
	files: list[str] = Field(default_factory=list)
	commands: list[str] = Field(default_factory=list)


class TodoTemplate(BaseModel):
	"""Blueprint a planning strategy emits for one todo."""
	title: str
	description: str
	priority: TodoPriority = Field(default=TodoPriority.MEDIUM)
	estimated_duration: int = Field(default=0, description="Minutes")
	tags: set[str] = Field(default_factory=set)


class Todo(BaseModel):
	"""A single unit of planned work owned by an agent."""
	id: str = Field(default_factory=new_id)
	agent_id: str
	title: str
	description: str = Field(default="")
	status: TodoStatus = Field(default=TodoStatus.PENDING)
	priority: TodoPriority = Field(default=TodoPriority.MEDIUM)

	# Timestamps
	created_at: datetime = Field(default_factory=datetime.now)
	updated_at: datetime = Field(default_factory=datetime.now)

	estimated_duration: int = Field(default=0, description="Estimate in minutes")
	actual_duration: Optional[int] = Field(default=None, description="Minutes actually spent")
	tags: set[str] = Field(default_factory=set)
	progress: float = Field(default=0, ge=0, le=100)
	context: Optional[TodoContext] = Field(default=None)

	@classmethod
	def from_template(
		cls,
		agent_id: str,
		template: TodoTemplate,
		context: Optional[TodoContext] = None,
	) -> "Todo":
		"""Instantiate a fresh pending todo from a template."""
		now = datetime.now()
		return cls(
			agent_id=agent_id,
			title=template.title,
			description=template.description,
			priority=template.priority,
			estimated_duration=template.estimated_duration,
			tags=set(template.tags),
			created_at=now,
			updated_at=now,
			context=context,
		)

	def touch(self):
		"""Refresh the modification timestamp."""
		self.updated_at = datetime.now()


class WorkPlan(BaseModel):
	"""Top-level record grouping the todos generated for one goal."""
	id: str = Field(default_factory=new_id)
	agent_id: str
	goal: str
	todos: list[str] = Field(default_factory=list, description="Todo ids, in plan order")
	estimated_time_total: int = Field(default=0, description="Sum of todo estimates in minutes")
	status: PlanStatus = Field(default=PlanStatus.PENDING)
	created_at: datetime = Field(default_factory=datetime.now)
	completed_at: Optional[datetime] = Field(default=None)
