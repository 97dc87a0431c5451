"""Plan parser - extracts the task graph from a PLAN.md document.

The parser is a small line-oriented state machine. Each stripped line is
classified (task header, field, list item, heading, text) and drives a
transition between four states:

- OUTSIDE_TASK: before the first task header, everything is ignored.
- IN_TASK_BODY: free text accumulates into the task description.
- IN_DEPENDENCIES: a ``Dependencies`` field was seen.
- IN_TIME: an ``Estimated Time`` field was seen.

Example:
    >>> graph = parse_dependency_graph('''
    ... ### TASK-001: Database Schema
    ... **Dependencies**: None
    ... **Estimated Time**: 2 hours
    ... ''')
    >>> graph["TASK-001"].estimated_time
    120.0
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from speckit.planning.models import Task, TaskGraph

# Long form (TASK-001) and short form (T001) identifiers
TASK_ID_PATTERN = r"TASK-\d+|T\d+"

_TASK_ID_RE = re.compile(rf"\b({TASK_ID_PATTERN})\b")
_HEADER_RE = re.compile(rf"^#+\s+({TASK_ID_PATTERN})[\s:-]+(.+)$")
_FIELD_RE = re.compile(
    r"^(?:[-*+]\s+)?[*_]{0,2}(dependencies|estimated\s+time)[*_]{0,2}\s*:[*_]{0,2}\s*(.*)$",
    re.IGNORECASE,
)
_LIST_ITEM_RE = re.compile(r"^[-*+]\s+(.+)$")
_HOURS_RE = re.compile(r"(\d*\.?\d+)\s*(?:hours?|hrs?|h)\b", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d*\.?\d+)\s*(?:minutes?|mins?|m)\b", re.IGNORECASE)


class ParserState(str, Enum):
    """States of the plan parser."""

    OUTSIDE_TASK = "outside_task"
    IN_TASK_BODY = "in_task_body"
    IN_DEPENDENCIES = "in_dependencies"
    IN_TIME = "in_time"


@dataclass
class _TaskBuilder:
    """Mutable accumulator for the task currently being parsed."""

    id: str
    name: str
    dependencies: list[str] = field(default_factory=list)
    estimated_time: float | None = None
    description_lines: list[str] = field(default_factory=list)
    # Field value was left empty and continues on the following lines
    pending_value: bool = False

    def build(self) -> Task:
        description = "".join(f"{line}\n" for line in self.description_lines)
        return Task(
            id=self.id,
            name=self.name,
            dependencies=self.dependencies,
            estimated_time=self.estimated_time,
            description=description,
        )


def parse_estimated_time(value: str) -> float | None:
    """
    Parse an estimate such as "2 hours", "1.5h" or "45 min" into minutes.

    A compound value like "1h 30m" adds its hour and minute parts.

    Args:
        value: Raw field value.

    Returns:
        Minutes, or None when the format is not recognised.
    """
    hours = _HOURS_RE.search(value)
    minutes = _MINUTES_RE.search(value)
    if hours is None and minutes is None:
        return None

    total = 0.0
    if hours:
        total += float(hours.group(1)) * 60
    if minutes:
        total += float(minutes.group(1))
    return total


def parse_dependency_list(value: str) -> list[str]:
    """
    Parse a comma-separated dependency value.

    "None" yields an empty list; every other entry contributes the task ID it
    contains, so "TASK-001 (needs database)" yields "TASK-001". Entries
    without an ID are dropped.
    """
    value = value.strip()
    if value.lower() == "none":
        return []

    dependencies: list[str] = []
    for entry in value.split(","):
        match = _TASK_ID_RE.search(entry)
        if match:
            dependencies.append(match.group(1))
    return dependencies


class PlanParser:
    """
    Parse plan documents into task graphs.

    Each call to ``parse`` builds a fresh graph; the parser keeps no state
    between calls.
    """

    def parse(self, content: str | None) -> TaskGraph:
        """
        Parse a plan document.

        Args:
            content: Full PLAN.md text. None or empty gives an empty graph.

        Returns:
            TaskGraph with one entry per task header, in document order.
        """
        tasks: dict[str, Task] = {}
        if not content:
            return TaskGraph(tasks=tasks)

        state = ParserState.OUTSIDE_TASK
        current: _TaskBuilder | None = None

        for raw_line in content.splitlines():
            line = raw_line.strip()

            header = _HEADER_RE.match(line)
            if header:
                if current is not None:
                    self._commit(tasks, current)
                current = _TaskBuilder(id=header.group(1), name=header.group(2).strip())
                state = ParserState.IN_TASK_BODY
                continue

            if current is None:
                continue

            field_match = _FIELD_RE.match(line)
            if field_match:
                state = self._start_field(current, field_match.group(1), field_match.group(2))
                continue

            if not line:
                continue

            if state == ParserState.IN_TASK_BODY:
                if not line.startswith("#"):
                    current.description_lines.append(line)
            elif current.pending_value:
                self._continue_field(current, state, line)

        if current is not None:
            self._commit(tasks, current)

        logger.debug(f"Parsed {len(tasks)} tasks from plan")
        return TaskGraph(tasks=tasks)

    @staticmethod
    def _start_field(current: _TaskBuilder, name: str, value: str) -> ParserState:
        value = value.strip()
        current.pending_value = not value

        if name.lower().startswith("dependencies"):
            current.dependencies = parse_dependency_list(value) if value else []
            return ParserState.IN_DEPENDENCIES

        current.estimated_time = parse_estimated_time(value) if value else None
        return ParserState.IN_TIME

    @staticmethod
    def _continue_field(current: _TaskBuilder, state: ParserState, line: str) -> None:
        if state == ParserState.IN_DEPENDENCIES:
            item = _LIST_ITEM_RE.match(line)
            if item is None:
                current.pending_value = False
                return
            current.dependencies.extend(parse_dependency_list(item.group(1)))
            return

        if state == ParserState.IN_TIME:
            current.estimated_time = parse_estimated_time(line)
            current.pending_value = False

    @staticmethod
    def _commit(tasks: dict[str, Task], builder: _TaskBuilder) -> None:
        if builder.id in tasks:
            logger.warning(f"Duplicate task {builder.id}, keeping the last definition")
        tasks[builder.id] = builder.build()


def parse_dependency_graph(content: str | None) -> TaskGraph:
    """
    Convenience function to parse a plan document.

    Example:
        >>> graph = parse_dependency_graph(plan_text)
        >>> graph.task_ids
        ['TASK-001', 'TASK-002']
    """
    return PlanParser().parse(content)
