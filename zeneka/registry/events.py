"""Events emitted by registry state transitions."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Registered:
    key_id: str
    registrant: str

    name = "Registered"


@dataclass(frozen=True)
class Committed:
    key_id: str
    proof_hash: str
    prover: str

    name = "Committed"


@dataclass(frozen=True)
class Revealed:
    key_id: str
    prover: str

    name = "Revealed"


_EVENT_TYPES = {cls.name: cls for cls in (Registered, Committed, Revealed)}


def event_to_dict(event: Any) -> Dict[str, Any]:
    payload = asdict(event)
    payload["event"] = event.name
    return payload


def event_from_dict(payload: Dict[str, Any]) -> Any:
    data = dict(payload)
    name = data.pop("event", None)
    if name not in _EVENT_TYPES:
        raise ValueError(f"unknown event: {name!r}")
    return _EVENT_TYPES[name](**data)
