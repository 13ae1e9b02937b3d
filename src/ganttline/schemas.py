"""Pydantic schemas for timeline YAML files."""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import TaskKind


class TaskSchema(BaseModel):
    """One node of a nested task forest."""

    id: str
    name: str
    start: date
    end: date
    progress: float = Field(default=0.0, ge=0, le=100)
    color: str | None = None
    kind: TaskKind = TaskKind.TASK
    children: list[TaskSchema] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_string(cls, v: Any) -> str:
        """Allow numeric ids in YAML."""
        return str(v)

    @field_validator("children", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> Any:
        if v is None:
            return []
        return v

    @model_validator(mode="after")
    def validate_end_after_start(self) -> TaskSchema:
        """Ensure the task does not end before it starts."""
        if self.end < self.start:
            raise ValueError(f"task '{self.id}': end date {self.end} is before start {self.start}")
        return self


class ViewportSchema(BaseModel):
    start: date
    end: date

    @model_validator(mode="after")
    def validate_end_after_start(self) -> ViewportSchema:
        if self.end < self.start:
            raise ValueError("viewport end must not be before its start")
        return self


class ForestSchema(BaseModel):
    """A file holding a nested forest (``format: forest``, the default)."""

    format: Literal["forest"] = "forest"
    viewport: ViewportSchema | None = None
    tasks: list[TaskSchema] = Field(default_factory=list)


class PhaseSchema(BaseModel):
    color: str | None = None


class WorkspaceTaskSchema(BaseModel):
    """A flat project task as stored by the workspace views."""

    id: str
    name: str
    phase: str | None = None
    status: str | None = None
    start: date | None = None
    end: date | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_string(cls, v: Any) -> str:
        return str(v)


class WorkspaceSchema(BaseModel):
    """A flat task list grouped into phases on load (``format: workspace``)."""

    format: Literal["workspace"]
    viewport: ViewportSchema | None = None
    phases: dict[str, PhaseSchema] = Field(default_factory=dict)
    tasks: list[WorkspaceTaskSchema] = Field(default_factory=list)

    @field_validator("phases", mode="before")
    @classmethod
    def ensure_phase_dict(cls, v: Any) -> Any:
        """Allow ``phases: {Design: }`` with no settings."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {name: settings or {} for name, settings in v.items()}  # type: ignore[misc]
        return v


TaskSchema.model_rebuild()
