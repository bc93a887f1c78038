"""
Everhour API Paths
------------------
Everhour has exposed two incompatible path conventions for a handful of
operations. A deployment picks exactly one table; the client never falls
back from one table to the other.

Operations not listed here have a single path and live in the client.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ApiPaths:
    """Versioned endpoints for one API convention."""
    version: str
    current_timer: str
    start_timer_for_task: str
    project_tasks: str
    current_user: str
    team_users: str

    def project_tasks_path(self, project_id: str) -> str:
        return self.project_tasks.format(project_id=project_id)

    def start_for_task(
        self,
        task_id: str,
        comment: Optional[str] = None
    ) -> Tuple[str, Dict[str, Any]]:
        """Path and body for starting a timer on a task."""
        if "{task_id}" in self.start_timer_for_task:
            return self.start_timer_for_task.format(task_id=task_id), {"comment": comment}
        return self.start_timer_for_task, {"task": task_id, "comment": comment}


CURRENT_PATHS = ApiPaths(
    version="current",
    current_timer="/timers/current",
    start_timer_for_task="/timers",
    project_tasks="/projects/{project_id}/tasks",
    current_user="/users/me",
    team_users="/team/users",
)

LEGACY_PATHS = ApiPaths(
    version="legacy",
    current_timer="/timer/running",
    start_timer_for_task="/timer/start_for/{task_id}",
    project_tasks="/tasks/for_project/{project_id}",
    current_user="/me",
    team_users="/users",
)

PATH_TABLES: Dict[str, ApiPaths] = {
    CURRENT_PATHS.version: CURRENT_PATHS,
    LEGACY_PATHS.version: LEGACY_PATHS,
}


def paths_for(version: str) -> ApiPaths:
    """Look up a path table; unknown versions are a KeyError."""
    return PATH_TABLES[version]
