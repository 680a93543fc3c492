# rich rendering of queued harvest tasks
# src/harvest/plan_view.py
"""
Terminal view of a task sequence.

render_task_table() turns queued tasks into a `rich` Table, one row per
task, so plans can be eyeballed from tools/harvest_demo.py or a debugger.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from .tasks import (
    DestroyRangeTask,
    MoveTask,
    PlantSaplingTask,
    SwitchLargeTreeTask,
    Task,
    WaitTask,
)


def _fmt(pos) -> str:
    return "({}, {}, {})".format(*pos)


def describe_task(task: Task) -> tuple[str, str]:
    """(kind, detail) strings for one task."""
    if isinstance(task, MoveTask):
        detail = _fmt(task.pos)
        if task.jump:
            detail += " jump"
            if task.from_xz is not None:
                detail += " from x={} z={}".format(*task.from_xz)
        return "move", detail
    if isinstance(task, DestroyRangeTask):
        return "destroy", f"{_fmt(task.low)} .. {_fmt(task.high)}"
    if isinstance(task, PlantSaplingTask):
        species = task.wood_type.name.lower() if task.wood_type else "any"
        return "plant", f"{_fmt(task.pos)} {species}"
    if isinstance(task, WaitTask):
        return "wait", f"{task.ticks} ticks"
    if isinstance(task, SwitchLargeTreeTask):
        if task.state is None:
            return "mode", "leave large tree"
        return "mode", f"large tree {task.state.to_dict()}"
    raise TypeError(f"Unknown task type {type(task).__name__}")


def render_task_table(tasks: Iterable[Task], title: Optional[str] = None) -> Table:
    table = Table(title=title or "Queued tasks")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Detail")

    for index, task in enumerate(tasks):
        kind, detail = describe_task(task)
        table.add_row(str(index), kind, detail)
    return table


def print_task_table(
    tasks: Iterable[Task],
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    (console or Console()).print(render_task_table(tasks, title))


__all__ = ["describe_task", "render_task_table", "print_task_table"]
