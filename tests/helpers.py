"""Shared test fixtures and helpers for agent-planner tests."""

import sys
from datetime import datetime, timedelta
from typing import Optional

from agent_planner.todos.models import Todo, TodoPriority, TodoStatus


def python_command(script: str) -> dict:
	"""An mcp_servers entry that runs a Python one-liner as a process target."""
	return {"command": sys.executable, "args": ["-c", script]}


ECHO_SCRIPT = "import sys; sys.stdout.write(sys.stdin.read())"
EXIT_2_SCRIPT = "import sys; sys.stdin.read(); sys.exit(2)"
SLEEP_SCRIPT = "import time; time.sleep(30)"


def make_todo(
	agent_id: str = "agent-1",
	title: str = "Write tests",
	status: TodoStatus = TodoStatus.PENDING,
	priority: TodoPriority = TodoPriority.MEDIUM,
	estimated_duration: int = 10,
	actual_duration: Optional[int] = None,
	age_minutes: int = 0,
) -> Todo:
	"""Create a Todo with realistic content for testing."""
	created = datetime.now() - timedelta(minutes=age_minutes)
	return Todo(
		agent_id=agent_id,
		title=title,
		description=f"{title} for the current goal",
		status=status,
		priority=priority,
		estimated_duration=estimated_duration,
		actual_duration=actual_duration,
		tags={"testing"},
		created_at=created,
		updated_at=created,
	)
