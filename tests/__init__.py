"""Tests for agent-planner: planning, todo tracking, delegation, and views."""
