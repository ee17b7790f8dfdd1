# Small FSM in the spirit of the 'transitions' library
# https://github.com/pytransitions/transitions

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from graphviz import Digraph

Callback = Callable[["EventData"], Any]
Condition = Callable[["EventData"], bool]


class MachineError(RuntimeError):
    """Raised when the machine is asked to fire a trigger it does not know."""


def _key(value: str | Enum) -> str:
    return value.name if isinstance(value, Enum) else str(value)


def _trigger_key(value: str | Enum) -> str:
    return value.name.lower() if isinstance(value, Enum) else str(value)


def _listify(value: Optional[Callback | Sequence[Callback]]) -> List[Callback]:
    if value is None:
        return []
    if callable(value):
        return [value]
    return [cb for cb in value if callable(cb)]


class State:
    def __init__(self, name: str | Enum) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return _key(self._name)

    @property
    def value(self) -> Any:
        return self._name

    def __repr__(self) -> str:
        return f"State({self.name})"


class EventData:
    """What callbacks and guards see while a trigger is being processed."""

    def __init__(self, machine: "Machine", trigger: Optional[str], kwargs: Dict[str, Any]) -> None:
        self.machine = machine
        self.trigger = trigger
        self.kwargs = kwargs
        self.source: Optional[State] = machine.current_state
        self.dest: Optional[State] = None


class Transition:
    def __init__(
        self,
        source: str,
        dest: str,
        *,
        conditions: Optional[Condition | Sequence[Condition]] = None,
        after: Optional[Callback | Sequence[Callback]] = None,
    ) -> None:
        self.source = source
        self.dest = dest
        self.conditions: List[Condition] = _listify(conditions)
        self.after = _listify(after)

    def execute(self, data: EventData) -> bool:
        data.dest = data.machine.get_state(self.dest)
        if not all(guard(data) for guard in self.conditions):
            return False
        data.machine._change_state(data.dest, data)
        for callback in self.after:
            callback(data)
        return True


class Machine:
    """Deterministic finite state machine.

    Firing a known trigger that has no transition out of the current state
    (or whose guards all refuse) returns False and leaves the machine
    untouched, which makes repeated triggers harmless.
    """

    def __init__(
        self,
        states: Sequence[str | Enum],
        initial_state: str | Enum,
    ) -> None:
        self._states: Dict[str, State] = {}
        self._transitions: Dict[str, Dict[str, List[Transition]]] = {}
        for state in states:
            name = _key(state)
            if name in self._states:
                raise ValueError(f"State '{name}' already registered.")
            self._states[name] = State(state)

        if _key(initial_state) not in self._states:
            raise ValueError("Initial state must be in the provided list of states.")
        self._current_state = self._states[_key(initial_state)]

    @property
    def states(self) -> Dict[str, State]:
        return dict(self._states)

    @property
    def current_state(self) -> State:
        return self._current_state

    @property
    def state(self) -> Any:
        return self._current_state.value

    def get_state(self, name: str | Enum) -> State:
        key = _key(name)
        if key not in self._states:
            raise ValueError(f"State '{key}' not found in machine states.")
        return self._states[key]

    def add_transition(
        self,
        trigger: str | Enum,
        sources: str | Enum | Sequence[str | Enum],
        dest: str | Enum,
        *,
        conditions: Optional[Condition | Sequence[Condition]] = None,
        after: Optional[Callback | Sequence[Callback]] = None,
    ) -> None:
        if isinstance(sources, (list, tuple)):
            source_names = [_key(s) for s in sources]
        else:
            source_names = [_key(sources)]

        dest_name = _key(dest)
        if dest_name not in self._states:
            raise ValueError(f"Unknown destination state '{dest_name}'.")

        by_source = self._transitions.setdefault(_trigger_key(trigger), defaultdict(list))
        for src in source_names:
            if src not in self._states:
                raise ValueError(f"Unknown source state '{src}'.")
            by_source[src].append(
                Transition(src, dest_name, conditions=conditions, after=after)
            )

    def trigger(self, name: str | Enum, **kwargs: Any) -> bool:
        key = _trigger_key(name)
        if key not in self._transitions:
            raise MachineError(f"Unknown trigger '{key}'.")
        data = EventData(self, key, kwargs)
        for transition in self._transitions[key].get(self._current_state.name, []):
            if transition.execute(data):
                return True
        return False

    def to_graphviz(self) -> Digraph:
        g = Digraph()
        for state in self._states.values():
            shape = "doublecircle" if state is self._current_state else "circle"
            g.node(state.name, shape=shape)

        for trigger, by_source in self._transitions.items():
            for src, transitions in by_source.items():
                for tr in transitions:
                    g.edge(src, tr.dest, label=trigger)
        return g

    def _change_state(self, dest: State, data: EventData) -> None:
        data.source = self._current_state
        self._current_state = dest
