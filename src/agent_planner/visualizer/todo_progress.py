"""Rich views for agent todos and work plans."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from ..todos.models import TodoPriority, TodoStatus, WorkPlan
from ..todos.store import TodoStore, sort_by_priority
from .utils import format_minutes, progress_bar

STATUS_ICONS = {
	TodoStatus.PENDING: "[dim][ ][/dim]",
	TodoStatus.IN_PROGRESS: "[yellow][~][/yellow]",
	TodoStatus.COMPLETED: "[green]\\[x][/green]",
	TodoStatus.FAILED: "[red]\\[-][/red]",
	TodoStatus.BLOCKED: "[red][!][/red]",
}

PRIORITY_STYLES = {
	TodoPriority.CRITICAL: "bold red",
	TodoPriority.HIGH: "yellow",
	TodoPriority.MEDIUM: "green",
	TodoPriority.LOW: "dim",
}


def render_agent_dashboard(
	store: TodoStore,
	agent_id: str,
	console: Optional[Console] = None,
	limit: int = 5,
) -> None:
	"""Render an agent's stats panel and its top todos by priority."""
	console = console or Console()
	stats = store.get_agent_stats(agent_id)

	lines = [
		f"[bold]Total todos:[/bold] {stats['total_todos']}",
		f"[bold]Completed:[/bold] [green]{stats['completed']}[/green]",
		f"[bold]In progress:[/bold] [yellow]{stats['in_progress']}[/yellow]",
		f"[bold]Pending:[/bold] [cyan]{stats['pending']}[/cyan]",
		f"[bold]Failed:[/bold] [red]{stats['failed']}[/red]",
		f"[bold]Blocked:[/bold] {stats['blocked']}",
		f"[bold]Avg completion:[/bold] {format_minutes(stats['average_completion_time'])}",
		f"[bold]Efficiency:[/bold] {stats['efficiency']:.0f}%",
	]

	todos = sort_by_priority(store.get_agent_todos(agent_id))
	if todos:
		lines.append("")
		lines.append("[bold]Current todos:[/bold]")
		for todo in todos[:limit]:
			icon = STATUS_ICONS.get(todo.status, "[ ]")
			style = PRIORITY_STYLES.get(todo.priority, "")
			lines.append(f"  {icon} [{style}]{todo.priority.value}[/{style}] {todo.title}")
			if todo.progress > 0:
				lines.append(f"      [cyan]{progress_bar(todo.progress)}[/cyan] {todo.progress:.0f}%")

	console.print(Panel("\n".join(lines), title=f"Agent {agent_id}", border_style="cyan"))


def render_work_plan(store: TodoStore, plan: WorkPlan, console: Optional[Console] = None) -> None:
	"""Render a work plan as a Rich Tree of its todos."""
	console = console or Console()

	todos = store.get_plan_todos(plan.id)
	done = len([t for t in todos if t.status == TodoStatus.COMPLETED])

	tree = Tree(
		f"[bold]{plan.goal}[/bold]  "
		f"[dim]({plan.status.value}, {done}/{len(todos)} todos, "
		f"~{format_minutes(plan.estimated_time_total)})[/dim]"
	)

	for todo in todos:
		icon = STATUS_ICONS.get(todo.status, "[ ]")
		tags = ", ".join(sorted(todo.tags))
		tree.add(
			f"{icon} {todo.title} [dim]- {todo.priority.value}, "
			f"{format_minutes(todo.estimated_duration)}, {tags}[/dim]"
		)

	console.print(tree)
