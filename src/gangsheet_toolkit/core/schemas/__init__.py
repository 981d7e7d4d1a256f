from .validator import PROJECT_SCHEMA_VERSION, ValidationError, validate_project

__all__ = ["PROJECT_SCHEMA_VERSION", "ValidationError", "validate_project"]
