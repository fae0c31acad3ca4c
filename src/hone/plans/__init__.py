"""PRD and task file discovery."""

from hone.plans.prds import (
    calculate_status,
    extract_feature_name,
    list_archivable_triplets,
    list_prds,
    load_task_file,
)
from hone.plans.schemas import PrdInfo, Task, TaskFile

__all__ = [
    "PrdInfo",
    "Task",
    "TaskFile",
    "calculate_status",
    "extract_feature_name",
    "list_archivable_triplets",
    "list_prds",
    "load_task_file",
]
