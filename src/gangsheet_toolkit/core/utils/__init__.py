from .serialization import payload_to_project, project_to_payload, structural_copy

__all__ = ["payload_to_project", "project_to_payload", "structural_copy"]
