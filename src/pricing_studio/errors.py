from __future__ import annotations


class PricingStudioError(Exception):
    pass


class ProjectNotFoundError(PricingStudioError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id
