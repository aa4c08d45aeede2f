"""Tests for visualizer Rich views."""

from rich.console import Console

from agent_planner.orchestrator.planner import Planner
from agent_planner.todos.models import TodoStatus
from agent_planner.todos.store import TodoStore
from agent_planner.visualizer.todo_progress import render_agent_dashboard, render_work_plan
from agent_planner.visualizer.utils import format_minutes, progress_bar


def _console() -> Console:
	return Console(record=True, width=120, force_terminal=False)


# -- utils tests --

def test_format_minutes_short():
	assert format_minutes(45) == "45min"


def test_format_minutes_whole_hours():
	assert format_minutes(120) == "2h"


def test_format_minutes_hours_and_minutes():
	assert format_minutes(65) == "1h 5min"


def test_progress_bar_bounds():
	assert progress_bar(0) == "░" * 10
	assert progress_bar(100) == "█" * 10
	assert progress_bar(150) == "█" * 10


def test_progress_bar_partial():
	assert progress_bar(55) == "█" * 5 + "░" * 5


# -- view tests --

def test_render_agent_dashboard_shows_stats_and_todos():
	store = TodoStore()
	todos = Planner(store).plan_todos("a1", "fix the importer")
	store.update_todo(todos[0].id, status=TodoStatus.COMPLETED, progress=100, actual_duration=20)
	store.update_todo(todos[1].id, status=TodoStatus.IN_PROGRESS, progress=40)

	console = _console()
	render_agent_dashboard(store, "a1", console=console)
	output = console.export_text()

	assert "Agent a1" in output
	assert "Total todos: 3" in output
	assert "Completed: 1" in output
	assert "Identify root cause" in output
	assert "40%" in output
	assert "[x]" in output


def test_render_agent_dashboard_respects_limit():
	store = TodoStore()
	Planner(store).plan_todos("a1", "build and debug")

	console = _console()
	render_agent_dashboard(store, "a1", console=console, limit=2)
	output = console.export_text()

	# Two critical todos come first
	assert "Implement solution" in output
	assert "Identify root cause" in output
	assert "Design solution" not in output


def test_render_agent_dashboard_empty_agent():
	console = _console()
	render_agent_dashboard(TodoStore(), "nobody", console=console)
	output = console.export_text()

	assert "Total todos: 0" in output
	assert "Current todos" not in output


def test_render_work_plan_lists_todos():
	store = TodoStore()
	plan, _ = Planner(store).plan_goal("a1", "Create a report")

	console = _console()
	render_work_plan(store, plan, console=console)
	output = console.export_text()

	assert "Create a report" in output
	assert "0/4 todos" in output
	assert "1h 5min" in output
	assert "Validate implementation" in output
	assert "implementation" in output
