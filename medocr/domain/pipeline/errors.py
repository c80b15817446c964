"""Domain-level errors for the pipeline.

Adapters raise these to their direct caller; the orchestrator turns them into
failed task results and the CLI into a non-zero exit.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base error for domain pipeline failures."""


class NotConfiguredError(PipelineError):
    """Raised when a vendor adapter is used without credentials."""

    def __init__(self, service: str, message: str | None = None) -> None:
        super().__init__(message or f"{service} client not initialized")
        self.service = service


class NoTextDetectedError(PipelineError):
    """Raised when the OCR vendor returns no full-text annotation."""

    def __init__(self, message: str = "No text detected in image") -> None:
        super().__init__(message)


class UnknownTaskTypeError(PipelineError):
    def __init__(self, task_type: str) -> None:
        super().__init__(f"Unknown task type: {task_type}")
        self.task_type = task_type


class VendorCallFailedError(PipelineError):
    """Raised when a vendor call fails: transport error, HTTP error status or error payload."""

    def __init__(self, service: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"{service} call failed: {message}")
        self.service = service
        self.details = details or {}


class InvalidInputError(PipelineError):
    """Raised when a task payload or input file is missing or malformed."""
