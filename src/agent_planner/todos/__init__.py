"""Todos module - In-memory work plan and todo tracking."""

from .models import (
	PlanStatus,
	Todo,
	TodoContext,
	TodoPriority,
	TodoStatus,
	TodoTemplate,
	WorkPlan,
)
from .store import TodoStore, sort_by_priority

__all__ = [
	"WorkPlan",
	"Todo",
	"TodoContext",
	"TodoTemplate",
	"TodoStatus",
	"TodoPriority",
	"PlanStatus",
	"TodoStore",
	"sort_by_priority",
]
