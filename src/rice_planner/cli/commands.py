# src/rice_planner/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..planning.capacity import plan
from ..planning.errors import BackendError, PlannerError, StateError, ValidationError
from ..planning.task_models import ImpactTier, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# Defaults of the "new task" form.
DEFAULT_TASK_INPUTS: dict[str, float] = {
    "reach": 1000.0,
    "impact": float(ImpactTier.HIGH),
    "confidence": 80,
    "strategy": 1.0,
    "effort": 10.0,
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValidationError as e:
            return f"Invalid input: {e}"
        except StateError as e:
            return _state_error_message(e)
        except BackendError as e:
            return f"Backend error: {e}"
        except PlannerError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _state_error_message(err: StateError) -> str:
    msg = str(err)
    if msg == "empty list":
        return "List is empty! Add tasks with /add first."
    if msg == "unauthenticated":
        return "Please login first: /login <username>."
    if msg == "not analyzed":
        return "Please analyze & sort first: /analyze."
    return msg


def _fmt_num(value: float) -> str:
    return f"{value:g}"


def format_task(task: Task, index: int | None = None) -> str:
    impact = task.impact_label or _fmt_num(task.impact)
    prefix = f"#{index} " if index is not None else ""
    status = "" if task.synced else " (unsaved)"
    return (
        f"{prefix}[{task.id}] {task.name}{status} | reach={_fmt_num(task.reach)} impact={impact} "
        f"confidence={task.confidence}% strategy=x{_fmt_num(task.strategy)} "
        f"effort={_fmt_num(task.effort)}d | score={task.score:.1f}"
    )


def _parse_add_args(args: list[str]) -> dict[str, object]:
    name_parts: list[str] = []
    values: dict[str, object] = dict(DEFAULT_TASK_INPUTS)

    for arg in args:
        key, sep, raw = arg.partition("=")
        if not sep:
            name_parts.append(arg)
            continue
        key = key.strip().lower()
        if key not in DEFAULT_TASK_INPUTS:
            raise ValidationError(f"Unknown field '{key}' (expected one of: {', '.join(DEFAULT_TASK_INPUTS)})")
        try:
            if key == "impact":
                values[key] = ImpactTier.parse(raw)
            elif key == "confidence":
                values[key] = int(raw)
            else:
                values[key] = float(raw)
        except ValueError as e:
            raise ValidationError(f"Bad value for {key}: {raw!r}") from e

    values["name"] = " ".join(name_parts) or "New Feature"
    return values


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    backend = getattr(state.settings, "backend_base_url", "") or "offline (local scoring)"
    fallback = "ON" if getattr(state.settings, "local_fallback", False) else "OFF"
    analyzed = "yes" if state.store.is_analyzed() else "no"
    return (
        "Status:\n"
        f"  User: {state.username or '(not logged in)'}\n"
        f"  Backend: {backend} (local fallback: {fallback})\n"
        f"  Sprint capacity: {_fmt_num(state.sprint_capacity)} person-days\n"
        f"  Tasks: {len(state.store)} (analyzed: {analyzed})\n"
        f"  Unresolved remote deletes: {len(state.coordinator.unresolved_deletes)}"
    )


def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /login <username>

    Only records the session user (no credentials); then loads that user's tasks.
    """
    if not args:
        return "Usage: /login <username>"

    username = args[0].strip()
    if state.username and username != state.username:
        # The pool belongs to the previous user.
        state.store.replace_all([])
    state.username = username
    logger.info("Session user set: %s", username)

    if emit:
        emit(f"Loading tasks for {username}...")
    try:
        tasks = state.runner.run(state.coordinator.load(username))
    except BackendError as e:
        return f"Welcome, {username}! Could not load saved tasks: {e}"
    return f"Welcome back, {username}! Loaded {len(tasks)} tasks."


def cmd_logout(state: AppState, args: list[str]) -> str:
    if not state.username:
        return "Not logged in."
    user = state.username
    state.username = None
    state.store.replace_all([])
    return f"Logged out {user}."


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <name> [reach=1000] [impact=high|3|2|1|0.5] [confidence=80] [strategy=1] [effort=10]
    """
    values = _parse_add_args(args)
    task = state.store.add(
        name=str(values["name"]),
        reach=cast(float, values["reach"]),
        impact=cast(float, values["impact"]),
        confidence=cast(int, values["confidence"]),
        strategy=cast(float, values["strategy"]),
        effort=cast(float, values["effort"]),
    )
    return f"Task added (not saved yet): {format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list         -> pool order
    /list ranked  -> descending score
    """
    view = (args[0].lower() if args else "pool")
    if view not in ("pool", "ranked"):
        return "Usage: /list [pool|ranked]"

    tasks = state.store.ranked() if view == "ranked" else state.store.pool()
    if not tasks:
        return "No tasks yet. Use /add to create one."

    lines = [f"Tasks ({view}):"]
    for i, task in enumerate(tasks, start=1):
        lines.append("  " + format_task(task, i))
    return "\n".join(lines)


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    try:
        task_id = int(args[0])
    except ValueError:
        return f"Not a task id: {args[0]!r}"

    removed = state.runner.run(state.coordinator.delete(task_id))
    if removed is None:
        return f"No task with id {task_id}."
    return f"Deleted: {removed.name}"


def cmd_analyze(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit and len(state.store) and state.username:
        emit(f"Scoring {len(state.store)} tasks...")
    ranked = state.runner.run(state.coordinator.analyze(state.username))
    lines = [f"Success! {len(ranked)} tasks scored and saved."]
    for i, task in enumerate(ranked, start=1):
        lines.append("  " + format_task(task, i))
    return "\n".join(lines)


def cmd_capacity(state: AppState, args: list[str]) -> str:
    """
    /capacity        -> show sprint capacity
    /capacity <days> -> set sprint capacity (person-days, > 0)
    """
    if not args:
        return f"Sprint capacity: {_fmt_num(state.sprint_capacity)} person-days."
    try:
        value = float(args[0])
    except ValueError:
        return "Usage: /capacity <person-days>"
    if value <= 0:
        return "Capacity must be > 0."
    state.sprint_capacity = value
    return f"Sprint capacity set to {_fmt_num(value)} person-days."


def cmd_plan(state: AppState, args: list[str]) -> str:
    result = plan(state.store.ranked(), state.sprint_capacity)
    lines = [
        "Sprint Auto-Plan Result",
        f"  Capacity: {_fmt_num(result.capacity)} person-days",
        f"  Used: {_fmt_num(result.used_effort)} ({result.utilization_percent}%)",
        f"  Selected {len(result.selected)} top priority tasks:",
    ]
    for i, task in enumerate(result.selected, start=1):
        lines.append(f"    #{i} {task.name} (Score: {task.score:.1f}, Effort: {_fmt_num(task.effort)}d)")
    if result.skipped:
        lines.append(f"  Skipped {len(result.skipped)}: " + ", ".join(t.name for t in result.skipped))
    return "\n".join(lines)


def cmd_retry(state: AppState, args: list[str]) -> str:
    if not state.coordinator.unresolved_deletes:
        return "No unresolved remote deletes."
    left = state.runner.run(state.coordinator.retry_unresolved_deletes())
    if left:
        return f"{left} remote deletes still unresolved."
    return "All remote deletes resolved."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session, backend and capacity.")
registry.register("login", cmd_login, help_text="Set the session user and load tasks: /login <username>.")
registry.register("logout", cmd_logout, help_text="End the session and clear the local pool.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <name> reach= impact= confidence= strategy= effort=.",
)
registry.register("list", cmd_list, help_text="List tasks: /list [pool|ranked].", aliases=["ls"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("analyze", cmd_analyze, help_text="Score all tasks remotely and save them.")
registry.register("capacity", cmd_capacity, help_text="Show/set sprint capacity: /capacity [days].")
registry.register("plan", cmd_plan, help_text="Greedy sprint plan within capacity.")
registry.register("retry", cmd_retry, help_text="Retry failed remote deletes.")
