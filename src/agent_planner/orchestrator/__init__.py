"""Orchestrator module - Goal planning and delegation to external servers."""

from .delegator import (
	DelegationError,
	DelegationExecFailed,
	DelegationHttpFailed,
	DelegationTimeout,
	Delegator,
	HttpTarget,
	ProcessTarget,
	ServerNotFound,
	load_targets,
)
from .planner import KeywordPlanningStrategy, Planner, PlanningStrategy

__all__ = [
	"Planner",
	"PlanningStrategy",
	"KeywordPlanningStrategy",
	"Delegator",
	"ProcessTarget",
	"HttpTarget",
	"load_targets",
	"DelegationError",
	"ServerNotFound",
	"DelegationExecFailed",
	"DelegationTimeout",
	"DelegationHttpFailed",
]
