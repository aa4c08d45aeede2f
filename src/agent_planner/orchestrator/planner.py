"""
Planner - Turns a goal into a work plan and an ordered list of todos.

Decomposition is delegated to a PlanningStrategy. The default
KeywordPlanningStrategy is rule-based and deterministic: it matches
trigger words in the goal and emits fixed todo templates. A richer
strategy can replace it without touching the store contract.
"""

import logging
from typing import Optional, Protocol

from ..todos.models import (
	Todo,
	TodoContext,
	TodoPriority,
	TodoTemplate,
	WorkPlan,
)
from ..todos.store import TodoStore

logger = logging.getLogger(__name__)


class PlanningStrategy(Protocol):
	"""Decomposes a goal into todo templates."""

	def decompose(self, goal: str) -> list[TodoTemplate]:
		...


class KeywordPlanningStrategy:
	"""
	Keyword-triggered decomposition.

	A goal mentioning "create" or "build" yields the build templates; one
	mentioning "fix" or "debug" yields the fix templates. Both may match,
	in which case build templates come first. Anything else yields nothing.
	"""

	BUILD_TRIGGERS = ("create", "build")
	FIX_TRIGGERS = ("fix", "debug")

	BUILD_TEMPLATES = [
		TodoTemplate(
			title="Analyze requirements",
			description="Understand what needs to be built",
			priority=TodoPriority.HIGH,
			estimated_duration=10,
			tags={"analysis"},
		),
		TodoTemplate(
			title="Design solution",
			description="Design the structure and components of the solution",
			priority=TodoPriority.MEDIUM,
			estimated_duration=15,
			tags={"design"},
		),
		TodoTemplate(
			title="Implement solution",
			description="Write code and create necessary files",
			priority=TodoPriority.CRITICAL,
			estimated_duration=30,
			tags={"implementation", "coding"},
		),
		TodoTemplate(
			title="Validate implementation",
			description="Run tests and validate the implementation",
			priority=TodoPriority.HIGH,
			estimated_duration=10,
			tags={"testing"},
		),
	]

	FIX_TEMPLATES = [
		TodoTemplate(
			title="Identify root cause",
			description="Analyze errors and logs to find the root cause",
			priority=TodoPriority.CRITICAL,
			estimated_duration=20,
			tags={"debugging"},
		),
		TodoTemplate(
			title="Implement fix",
			description="Apply a fix that resolves the issue",
			priority=TodoPriority.HIGH,
			estimated_duration=15,
			tags={"bugfix"},
		),
		TodoTemplate(
			title="Verify resolution",
			description="Confirm the issue no longer occurs",
			priority=TodoPriority.MEDIUM,
			estimated_duration=10,
			tags={"testing"},
		),
	]

	def decompose(self, goal: str) -> list[TodoTemplate]:
		normalized = goal.lower()
		templates: list[TodoTemplate] = []

		if any(word in normalized for word in self.BUILD_TRIGGERS):
			templates.extend(self.BUILD_TEMPLATES)
		if any(word in normalized for word in self.FIX_TRIGGERS):
			templates.extend(self.FIX_TEMPLATES)

		return [t.model_copy(deep=True) for t in templates]


class Planner:
	"""
	Creates work plans and plans todos for agents.

	All state lives in the TodoStore passed in; the planner itself
	holds nothing but its strategy.
	"""

	def __init__(self, store: TodoStore, strategy: Optional[PlanningStrategy] = None):
		"""Initialize the planner."""
		self.store = store
		self.strategy = strategy or KeywordPlanningStrategy()

	def create_work_plan(self, agent_id: str, goal: str) -> WorkPlan:
		"""
		Create an empty pending work plan and register it.

		Args:
			agent_id: Owning agent
			goal: Natural-language goal

		Returns:
			The new WorkPlan
		"""
		plan = WorkPlan(agent_id=agent_id, goal=goal)
		self.store.add_plan(plan)
		logger.info(f"Created work plan {plan.id} for agent {agent_id}")
		return plan

	def plan_todos(
		self,
		agent_id: str,
		goal: str,
		context: Optional[dict] = None,
	) -> list[Todo]:
		"""
		Decompose a goal into todos and register them in the store.

		An empty list is a valid result: goals with no recognized trigger
		produce zero todos.

		Args:
			agent_id: Owning agent
			goal: Natural-language goal
			context: Optional planning context; when given, each todo records
				why it was generated

		Returns:
			Todos in template order
		"""
		logger.info(f"Agent {agent_id} is planning todos for: {goal}")

		todo_context = None
		if context is not None:
			todo_context = TodoContext(
				reasoning=f"Generated for goal: {goal}",
				files=list(context.get("files", [])),
				commands=list(context.get("commands", [])),
			)

		todos = []
		for template in self.strategy.decompose(goal):
			todo = Todo.from_template(
				agent_id,
				template,
				context=todo_context.model_copy(deep=True) if todo_context else None,
			)
			self.store.add_todo(todo)
			todos.append(todo)

		if todos:
			logger.info(f"Agent {agent_id} created {len(todos)} todos")
		else:
			logger.info(f"No todos planned for agent {agent_id}")

		return todos

	def plan_goal(
		self,
		agent_id: str,
		goal: str,
		context: Optional[dict] = None,
	) -> tuple[WorkPlan, list[Todo]]:
		"""Create a plan, plan its todos, and attach them to it."""
		plan = self.create_work_plan(agent_id, goal)
		todos = self.plan_todos(agent_id, goal, context=context)
		self.store.attach_todos(plan.id, todos)
		return plan, todos
