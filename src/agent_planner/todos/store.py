"""
Todo Store - In-memory registry of work plans and todos.

Features:
- O(1) lookup of plans and todos by id
- Per-agent queries in insertion order
- Status and progress updates that tolerate unknown ids
- Per-agent work statistics

Lookups and updates for unknown ids are no-ops rather than errors, so
planning and execution can race without failing each other.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from .models import PlanStatus, Todo, TodoStatus, WorkPlan

logger = logging.getLogger(__name__)

# Fields callers may change through update_todo()
UPDATABLE_FIELDS = {"status", "progress", "actual_duration", "description", "context"}


def sort_by_priority(todos: Iterable[Todo]) -> list[Todo]:
	"""Order todos by priority (critical first), then by creation time."""
	return sorted(todos, key=lambda t: (-t.priority.rank, t.created_at))


class TodoStore:
	"""
	Authoritative in-memory registry for one orchestration session.

	Usage:
		store = TodoStore()
		store.add_plan(plan)
		store.add_todo(todo)

		store.update_todo_status(todo.id, TodoStatus.COMPLETED)
		todos = store.get_agent_todos("agent-1")
	"""

	def __init__(self):
		"""Initialize an empty store."""
		self._plans: dict[str, WorkPlan] = {}
		self._todos: dict[str, Todo] = {}

	def __len__(self) -> int:
		return len(self._todos)

	# Plans

	def add_plan(self, plan: WorkPlan) -> WorkPlan:
		"""Register a work plan."""
		self._plans[plan.id] = plan
		logger.debug(f"Stored plan {plan.id} for agent {plan.agent_id}")
		return plan

	def get_plan(self, plan_id: str) -> Optional[WorkPlan]:
		"""Get a plan by id, or None if unknown."""
		return self._plans.get(plan_id)

	def list_plans(self) -> list[WorkPlan]:
		"""All plans, in creation order."""
		return list(self._plans.values())

	def get_agent_plans(self, agent_id: str) -> list[WorkPlan]:
		"""Plans owned by an agent, in creation order."""
		return [p for p in self._plans.values() if p.agent_id == agent_id]

	def attach_todos(self, plan_id: str, todos: Iterable[Todo]) -> Optional[WorkPlan]:
		"""
		Append todos to a plan and recompute its time estimate.

		Args:
			plan_id: Plan to attach to
			todos: Todos to append, in plan order

		Returns:
			The updated plan, or None if the plan is unknown
		"""
		plan = self._plans.get(plan_id)
		if not plan:
			return None

		for todo in todos:
			if todo.id not in plan.todos:
				plan.todos.append(todo.id)

		plan.estimated_time_total = sum(
			self._todos[todo_id].estimated_duration
			for todo_id in plan.todos
			if todo_id in self._todos
		)
		return plan

	def update_plan_status(self, plan_id: str, status: PlanStatus) -> Optional[WorkPlan]:
		"""Move a plan to a new status. Unknown ids are ignored."""
		status = PlanStatus(status)
		plan = self._plans.get(plan_id)
		if not plan:
			return None

		plan.status = status
		if status in (PlanStatus.COMPLETED, PlanStatus.FAILED):
			plan.completed_at = datetime.now()
		logger.info(f"Plan {plan_id} marked {status.value}")
		return plan

	# Todos

	def add_todo(self, todo: Todo) -> Todo:
		"""Register a todo. Orphan todos (no matching plan) are accepted."""
		self._todos[todo.id] = todo
		return todo

	def get_todo(self, todo_id: str) -> Optional[Todo]:
		"""Get a todo by id, or None if unknown."""
		return self._todos.get(todo_id)

	def get_agent_todos(self, agent_id: str) -> list[Todo]:
		"""All todos owned by an agent, in insertion order."""
		return [t for t in self._todos.values() if t.agent_id == agent_id]

	def get_plan_todos(self, plan_id: str) -> list[Todo]:
		"""Todos attached to a plan, in plan order."""
		plan = self._plans.get(plan_id)
		if not plan:
			return []
		return [self._todos[tid] for tid in plan.todos if tid in self._todos]

	def update_todo_status(self, todo_id: str, status: TodoStatus) -> Optional[Todo]:
		"""Set a todo's status. A silent no-op for unknown ids."""
		status = TodoStatus(status)
		todo = self._todos.get(todo_id)
		if not todo:
			return None

		todo.status = status
		todo.touch()
		logger.debug(f"Todo {todo_id} -> {status.value}")
		return todo

	def update_todo(self, todo_id: str, **updates) -> Optional[Todo]:
		"""
		Apply last-write-wins updates to a todo.

		Args:
			todo_id: Todo to update
			**updates: Any of status, progress, actual_duration, description, context

		Returns:
			The updated todo, or None if unknown

		Raises:
			ValueError: If an update names a field that cannot be changed
		"""
		unknown = set(updates) - UPDATABLE_FIELDS
		if unknown:
			raise ValueError(f"Cannot update todo fields: {', '.join(sorted(unknown))}")

		todo = self._todos.get(todo_id)
		if not todo:
			return None

		if "status" in updates:
			updates["status"] = TodoStatus(updates["status"])
		if "progress" in updates:
			updates["progress"] = max(0, min(100, updates["progress"]))

		for key, value in updates.items():
			setattr(todo, key, value)
		todo.touch()
		return todo

	def get_agent_stats(self, agent_id: str) -> dict:
		"""
		Summarize an agent's work.

		Returns:
			Dict with status counts, average completion time (minutes) and
			efficiency (estimated vs actual time of completed todos, as a percent)
		"""
		todos = self.get_agent_todos(agent_id)
		completed = [t for t in todos if t.status == TodoStatus.COMPLETED]

		total_actual = sum(t.actual_duration or 0 for t in completed)
		total_estimated = sum(t.estimated_duration for t in completed)

		def count(status: TodoStatus) -> int:
			return len([t for t in todos if t.status == status])

		return {
			"total_todos": len(todos),
			"completed": len(completed),
			"in_progress": count(TodoStatus.IN_PROGRESS),
			"pending": count(TodoStatus.PENDING),
			"failed": count(TodoStatus.FAILED),
			"blocked": count(TodoStatus.BLOCKED),
			"average_completion_time": total_actual / len(completed) if completed else 0,
			"efficiency": total_estimated / max(total_actual, 1) * 100 if total_estimated > 0 else 100,
		}
