"""Typed answers collected by the scaffolder.

A ``ScaffoldRequest`` is built once from the interactive answers and is
immutable for the rest of the run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TemplateKind(str, Enum):
    """Project templates offered by the scaffolder."""

    BASIC_CRUD = "basic-crud"
    DASHBOARD = "dashboard"
    PLUGIN = "plugin"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _TEMPLATE_LABELS[self]

    @property
    def directory_names(self) -> tuple[str, ...]:
        """Candidate template directory names, most specific first."""
        bundled = _TEMPLATE_DIRECTORIES.get(self)
        if bundled:
            return (bundled, self.value)
        return (self.value,)


_TEMPLATE_LABELS: dict[TemplateKind, str] = {
    TemplateKind.BASIC_CRUD: "Basic CRUD App",
    TemplateKind.DASHBOARD: "Simple Dashboard",
    TemplateKind.PLUGIN: "Plugin Starter",
    TemplateKind.CUSTOM: "Custom (from scratch)",
}

_TEMPLATE_DIRECTORIES: dict[TemplateKind, str] = {
    TemplateKind.BASIC_CRUD: "basic-crud-app",
    TemplateKind.DASHBOARD: "simple-dashboard",
    TemplateKind.PLUGIN: "plugin-starter",
}


class ScaffoldError(Exception):
    """Base class for errors that abort a scaffold run."""


def is_directory_name(name: str) -> bool:
    """True if *name* can be used as one path component under the working dir."""
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class DatabaseChoice(str, Enum):
    """Database backends the generated project can be pointed at."""

    SUPABASE = "supabase"
    LOCAL = "local"
    NONE = "none"

    @property
    def label(self) -> str:
        return _DATABASE_LABELS[self]


_DATABASE_LABELS: dict[DatabaseChoice, str] = {
    DatabaseChoice.SUPABASE: "Use Supabase (recommended)",
    DatabaseChoice.LOCAL: "Use local PostgreSQL",
    DatabaseChoice.NONE: "Skip database setup",
}


class ScaffoldRequest(BaseModel):
    """Everything the user told the scaffolder about the new project."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., min_length=1, description="Directory and package name")
    description: str = Field(default="", description="Optional one-line description")
    template_kind: TemplateKind = Field(default=TemplateKind.CUSTOM)
    database_choice: DatabaseChoice = Field(default=DatabaseChoice.SUPABASE)
    auth_enabled: bool = Field(default=False)

    @field_validator("project_name", "description", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("project_name")
    @classmethod
    def _single_directory(cls, value: str) -> str:
        if not is_directory_name(value):
            raise ValueError(f"Project name {value!r} must be a single directory name")
        return value
