"""
Socket type system.

Sockets are the typed connection points on graph nodes. Every socket carries a
value kind and a direction; an edge may only join an output socket to an input
socket whose kinds agree, with ``any`` acting as a wildcard on either side.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class SocketType(Enum):
    """Value kinds a socket can carry."""
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ANY = "any"
    FLOW = "flow"

    @classmethod
    def parse(cls, value: Union[str, 'SocketType']) -> 'SocketType':
        """Parse a socket type from its name, accepting any letter case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown socket type: {value!r}") from None


class SocketDirection(Enum):
    """Which side of a node a socket sits on."""
    INPUT = "input"
    OUTPUT = "output"

    @classmethod
    def parse(cls, value: Union[str, 'SocketDirection']) -> 'SocketDirection':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown socket direction: {value!r}") from None


@dataclass
class Socket:
    """A typed, directed connection point on a node."""
    id: str
    name: str
    kind: SocketType
    direction: SocketDirection
    default_value: Any = None

    @property
    def is_flow(self) -> bool:
        return self.kind is SocketType.FLOW

    def matches(self, key: str) -> bool:
        """Check whether ``key`` names this socket by id or lower-cased name."""
        return key == self.id or key.lower() == self.name.lower()

    def to_dict(self) -> dict:
        data = {
            'id': self.id,
            'name': self.name,
            'type': self.kind.value,
            'direction': self.direction.value,
        }
        if self.default_value is not None:
            data['default'] = self.default_value
        return data


def create_socket(socket_id: str, name: str, kind: Union[str, SocketType],
                  direction: Union[str, SocketDirection], default: Any = None) -> Socket:
    """Create a socket, parsing string kinds and directions."""
    return Socket(
        id=socket_id,
        name=name,
        kind=SocketType.parse(kind),
        direction=SocketDirection.parse(direction),
        default_value=default,
    )


def are_compatible(source: Optional[Socket], target: Optional[Socket]) -> bool:
    """Check whether an edge may join ``source`` to ``target``.

    Sockets with the same direction never connect. Otherwise ``any`` on
    either side matches everything and the remaining kinds must be equal.
    """
    if source is None or target is None:
        return False
    if source.direction is target.direction:
        return False
    if source.kind is SocketType.ANY or target.kind is SocketType.ANY:
        return True
    return source.kind is target.kind
