"""Player models produced by player enumeration."""

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PlayerRecord:
    """A player and the fields of its status reply.

    Attributes:
        player_id: Player identifier (usually its MAC address).
        fields: Status fields keyed by name (e.g. "power", "mixer volume").
    """

    player_id: str
    fields: dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, str]:
        """Return the status fields merged with the player id."""
        return {**self.fields, "player_id": self.player_id}

    @property
    def name(self) -> str:
        """Return the player name, falling back to the id."""
        return self.fields.get("player_name") or self.player_id

    @property
    def power(self) -> bool:
        """Return True if the player reports power on."""
        return self.fields.get("power", "0") == "1"

    @property
    def volume(self) -> int:
        """Return the mixer volume (0-100), or 0 if unknown.

        Muted players report their volume as a negative number.
        """
        try:
            return max(int(float(self.fields.get("mixer volume", "0"))), 0)
        except ValueError:
            return 0


@dataclass(frozen=True)
class PlayerFailure:
    """A player whose lookup failed during enumeration.

    Attributes:
        index: Server-assigned player index.
        player_id: Player id, if it was resolved before the failure.
        error: The exception raised by the lookup.
    """

    index: int
    player_id: str | None
    error: Exception


@dataclass(frozen=True)
class PlayersResult:
    """Players found on a server, plus the lookups that failed."""

    players: list[PlayerRecord] = field(default_factory=list)
    failures: list[PlayerFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True if every player lookup succeeded."""
        return not self.failures

    def __iter__(self) -> Iterator[PlayerRecord]:
        return iter(self.players)

    def __len__(self) -> int:
        return len(self.players)
