"""
Agent Scheduler - Runs scraper agents on cron schedules.

Supports a compact cron dialect: ``*``, comma lists, ``base/step`` and
``a-b`` ranges in each of the five fields (minute, hour, day of month,
month, day of week with 0 = Sunday).
"""

from datetime import datetime
from typing import Optional, Union
import logging

from signal_desk.core.exceptions import CronError, StorageError
from signal_desk.core.models import AgentId, Schedule
from signal_desk.tracker.storage import Storage


SCHEDULES_KEY = "agentSchedules"


def _to_int(text: str, expr: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise CronError(f"Invalid cron field '{expr}'") from None


def _field_matches(part: str, value: int) -> bool:
    if part == "*":
        return True

    if "," in part:
        # Evaluate every item so malformed ones are reported
        results = [_field_matches(item, value) for item in part.split(",")]
        return any(results)

    if "/" in part:
        base, _, step = part.partition("/")
        step = _to_int(step, part)
        if step <= 0:
            raise CronError(f"Invalid cron step '{part}'")
        base = 0 if base in ("", "*") else _to_int(base, part)
        return value % step == base

    if "-" in part:
        start, _, end = part.partition("-")
        return _to_int(start, part) <= value <= _to_int(end, part)

    return value == _to_int(part, part)


def split_cron(expr: str) -> list[str]:
    """Split an expression into its five fields."""
    fields = expr.strip().split()
    if len(fields) != 5:
        raise CronError(f"Cron expression must have 5 fields, got {len(fields)}: '{expr}'")
    return fields


def cron_matches(expr: str, when: datetime) -> bool:
    """
    Check whether a cron expression fires at the given minute.

    Raises:
        CronError: If the expression is malformed
    """
    minute, hour, day, month, weekday = split_cron(expr)

    # Evaluate all fields before combining so errors are never short-circuited
    results = [
        _field_matches(minute, when.minute),
        _field_matches(hour, when.hour),
        _field_matches(day, when.day),
        _field_matches(month, when.month),
        _field_matches(weekday, (when.weekday() + 1) % 7),
    ]
    return all(results)


class AgentScheduler:
    """Persistent list of agent schedules."""

    def __init__(self, storage: Storage, known_agents: Optional[list[AgentId]] = None):
        """
        Initialize the scheduler.

        Args:
            storage: Storage backend for the schedule list
            known_agents: Agents that may be scheduled (defaults to all)
        """
        self.storage = storage
        self.known_agents = list(known_agents) if known_agents is not None else list(AgentId)
        self.logger = logging.getLogger(self.__class__.__name__)
        self.schedules: list[Schedule] = self._load()

    def _load(self) -> list[Schedule]:
        try:
            stored = self.storage.get(SCHEDULES_KEY, [])
        except StorageError as e:
            self.logger.error(f"Stored schedules unreadable, starting empty: {e}")
            return []

        if stored is None:
            return []
        if not isinstance(stored, list):
            self.logger.error(
                f"Stored schedules are {type(stored).__name__}, expected a list; starting empty"
            )
            return []

        schedules = []
        for data in stored:
            if not isinstance(data, dict):
                self.logger.error(f"Skipping malformed schedule: {data!r}")
                continue
            try:
                schedules.append(Schedule.from_dict(data))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.error(f"Skipping malformed schedule: {e}")
        return schedules

    def _persist(self) -> None:
        self.storage.set(SCHEDULES_KEY, [s.to_dict() for s in self.schedules])

    def add(self, agent_id: Union[AgentId, str], cron: str) -> Schedule:
        """
        Schedule an agent.

        Raises:
            CronError: If the expression is malformed
            ValueError: If the agent is unknown
        """
        agent_id = AgentId(agent_id)
        if agent_id not in self.known_agents:
            raise ValueError(f"Unknown agent: {agent_id.value}")

        cron = " ".join(split_cron(cron))
        cron_matches(cron, datetime.now())

        schedule = Schedule(agent_id=agent_id, cron=cron)
        self.schedules.append(schedule)
        self._persist()
        self.logger.info(f"Scheduled {agent_id.value} at '{cron}' ({schedule.id})")
        return schedule

    def remove(self, schedule_id: str) -> bool:
        before = len(self.schedules)
        self.schedules = [s for s in self.schedules if s.id != schedule_id]
        if len(self.schedules) == before:
            return False
        self._persist()
        self.logger.info(f"Removed schedule {schedule_id}")
        return True

    def due(self, now: Optional[datetime] = None) -> list[Schedule]:
        """Schedules that fire at the given minute."""
        now = now or datetime.now()
        due = []
        for schedule in self.schedules:
            try:
                if cron_matches(schedule.cron, now):
                    due.append(schedule)
            except CronError as e:
                self.logger.warning(f"Skipping schedule {schedule.id}: {e}")
        return due

    def tick(self, registry, now: Optional[datetime] = None) -> dict[str, list[str]]:
        """
        Run the simulation of every due schedule.

        Returns:
            Mapping of schedule id to the agent's log lines
        """
        logs = {}
        for schedule in self.due(now):
            agent = registry.get(schedule.agent_id)
            if agent is None:
                self.logger.warning(f"No agent registered for {schedule.agent_id.value}")
                continue
            logs[schedule.id] = registry.simulate(schedule.agent_id)
        return logs

    def list(self) -> list[Schedule]:
        return list(self.schedules)
