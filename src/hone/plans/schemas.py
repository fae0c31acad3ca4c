"""Pydantic schemas for PRD task files and PRD listings.

- Task / TaskFile: the YAML task list stored next to each PRD
- PrdInfo: one row of the PRD listing, with its derived status

Task files are written by hand as often as by tools, so the task schemas
only insist on the structure (a mapping with a list of task mappings).
Missing fields fall back to defaults and any status other than
``completed`` simply counts as not done.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

PrdStatus = Literal["not started", "in progress", "completed"]


class Task(BaseModel):
    """A single task inside a task file."""

    id: str = ""
    title: str = ""
    description: str = ""
    status: str = "pending"
    dependencies: list[str] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list)
    completed_at: datetime | str | None = None

    model_config = {"coerce_numbers_to_str": True}


class TaskFile(BaseModel):
    """Parsed ``tasks-<feature>.yml`` file.

    Attributes:
        feature: Feature name the tasks belong to
        prd: Relative path of the PRD the tasks were generated from
        created_at: When the task file was generated
        updated_at: When the task file was last changed
        tasks: Ordered task list
    """

    feature: str = ""
    prd: str | None = None
    created_at: datetime | str | None = None
    updated_at: datetime | str | None = None
    tasks: list[Task] = Field(default_factory=list)

    model_config = {"coerce_numbers_to_str": True}


class PrdInfo(BaseModel):
    """Listing entry for one PRD.

    Attributes:
        filename: PRD file name (``prd-<feature>.md``)
        feature: Feature name derived from the file name
        task_file: Task file name, if one exists and parses
        status: Derived completion status
        completed_count: Completed tasks (None without a task file)
        total_count: Total tasks (None without a task file)
    """

    filename: str
    feature: str
    task_file: str | None = None
    status: PrdStatus = "not started"
    completed_count: int | None = None
    total_count: int | None = None

    model_config = {"frozen": True}
