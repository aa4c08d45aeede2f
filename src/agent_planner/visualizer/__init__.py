"""Visualizer package - Rich terminal views for agent todos and plans."""

from .todo_progress import render_agent_dashboard, render_work_plan

__all__ = [
	"render_agent_dashboard",
	"render_work_plan",
]
