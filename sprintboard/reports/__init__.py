from .analytics import assignee_workload, burndown, epic_progress, velocity

__all__ = ["burndown", "velocity", "epic_progress", "assignee_workload"]
