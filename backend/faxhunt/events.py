"""Realtime event models.

Every message the server pushes over Socket.IO is one variant of ``Event``.
The wire format is the Socket.IO event name (the ``type`` tag) plus a JSON
payload; ``to_wire`` and ``from_wire`` convert between the two.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class PlayerInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    color: str


class ObjectPosition(BaseModel):
    """Authoritative target position, pushed on every tick and on connect."""

    type: Literal['objectPosition'] = 'objectPosition'
    x: float
    y: float


class NewShot(BaseModel):
    type: Literal['newShot'] = 'newShot'
    x: float
    y: float
    username: str
    color: str
    timestamp: int  # epoch ms


class GameOver(BaseModel):
    type: Literal['gameOver'] = 'gameOver'
    winner: str


class GameReset(BaseModel):
    type: Literal['gameReset'] = 'gameReset'


class UserListUpdate(BaseModel):
    """Roster snapshot. On the wire the payload is the bare list."""

    type: Literal['updateUserList'] = 'updateUserList'
    players: list[PlayerInfo] = Field(default_factory=list)


Event = Annotated[
    Union[ObjectPosition, NewShot, GameOver, GameReset, UserListUpdate],
    Field(discriminator='type'),
]

EVENT_NAMES = ('objectPosition', 'newShot', 'gameOver', 'gameReset', 'updateUserList')

_event_adapter = TypeAdapter(Event)


def to_wire(event) -> tuple[str, Any]:
    if isinstance(event, UserListUpdate):
        return event.type, [p.model_dump() for p in event.players]
    return event.type, event.model_dump(exclude={'type'})


def from_wire(name: str, data: Any):
    """Decode a Socket.IO event into its model.

    Raises ``pydantic.ValidationError`` for a bad payload and ``TypeError``
    when a non-roster event carries something other than an object.
    """
    if name == 'updateUserList':
        return UserListUpdate(players=data or [])
    if data is not None and not isinstance(data, dict):
        raise TypeError(f"{name} payload must be an object, got {type(data).__name__}")
    payload = dict(data or {})
    payload['type'] = name
    return _event_adapter.validate_python(payload)
