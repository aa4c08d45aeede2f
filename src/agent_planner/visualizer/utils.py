"""Shared utilities for visualizer views."""


def format_minutes(minutes: float) -> str:
	"""Format a duration in minutes for display. e.g. '45min', '1h 5min'."""
	minutes = round(minutes)
	if minutes < 60:
		return f"{minutes}min"
	hours, rest = divmod(minutes, 60)
	if rest == 0:
		return f"{hours}h"
	return f"{hours}h {rest}min"


def progress_bar(progress: float, width: int = 10) -> str:
	"""Render a 0-100 progress value as a block bar."""
	filled = int(max(0, min(100, progress)) // (100 / width))
	return "█" * filled + "░" * (width - filled)
