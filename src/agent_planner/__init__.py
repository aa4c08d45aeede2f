"""agent-planner: goal planning, todo tracking, and delegation for autonomous agents."""

__version__ = "0.1.0"
