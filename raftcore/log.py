"""Log entries, snapshots, node roles and non-volatile write operations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar, Union

from raftcore.conf import ConfValue, ConfVersion

T = TypeVar("T")
U = TypeVar("U")


class RaftRole(enum.Enum):
    LEADER = "Leader"
    FOLLOWER = "Follower"
    CANDIDATE = "Candidate"
    LEARNER = "Learner"


@dataclass(frozen=True)
class TermIndex:
    """A ``(term, index)`` position in the log."""

    term: int = 0
    index: int = 0


@dataclass(frozen=True)
class LogEntry(Generic[T]):
    """A single log entry carrying a value."""

    term: int
    index: int
    value: T

    def map(self, f: Callable[[T], U]) -> LogEntry[U]:
        """Return an entry at the same position with ``f`` applied to the value."""
        return LogEntry(term=self.term, index=self.index, value=f(self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"term": self.term, "index": self.index, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry[Any]:
        return cls(term=int(data["term"]), index=int(data["index"]), value=data["value"])


def _by_index(entries: Iterable[LogEntry[Any]]) -> list[LogEntry[Any]]:
    return sorted(entries, key=lambda e: e.index)


@dataclass(frozen=True)
class SnapshotRange(Generic[T]):
    """Snapshot entries covering ``begin_index`` up to ``end_index``."""

    begin_index: int = 0
    end_index: int = 0
    entries: frozenset[LogEntry[T]] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", frozenset(self.entries))

    def to_snapshot_index_term(self) -> TermIndex:
        """Term and index of the last snapshot entry.

        Raises ValueError when the highest entry index is not ``end_index``.
        """
        entries = _by_index(self.entries)
        if not entries:
            return TermIndex(term=0, index=0)
        last = entries[-1]
        if last.index != self.end_index:
            raise ValueError("the last entry index must be the end index of the snapshot")
        return TermIndex(term=last.term, index=self.end_index)

    def to_value(self) -> list[LogEntry[T]]:
        """The snapshot entries ordered by index."""
        return _by_index(self.entries)

    def map(self, f: Callable[[T], U]) -> SnapshotRange[U]:
        return SnapshotRange(
            begin_index=self.begin_index,
            end_index=self.end_index,
            entries=frozenset(e.map(f) for e in self.entries),
        )


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    """Snapshot state at a given index and term."""

    index: int = 0
    term: int = 0
    entries: frozenset[LogEntry[T]] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", frozenset(self.entries))


@dataclass(frozen=True)
class WriteEntriesOpt:
    """Options for writing log entries."""

    truncate_left: bool = False
    truncate_right: bool = True


@dataclass(frozen=True)
class WriteSnapshotOpt:
    """Options for writing snapshot entries."""

    truncate_left: bool = True
    truncate_right: bool = False


@dataclass(frozen=True)
class OpUpConfCommitted:
    value: ConfValue
    version: ConfVersion


@dataclass(frozen=True)
class OpUpConfNew:
    value: ConfValue
    version: ConfVersion


@dataclass(frozen=True)
class OpUpCommitIndex:
    index: int


@dataclass(frozen=True)
class OpUpTermVotedFor:
    term: int
    voted_for: Optional[int] = None


@dataclass(frozen=True)
class OpWriteLog(Generic[T]):
    prev_index: int
    entries: list[LogEntry[T]]
    opt: WriteEntriesOpt = field(default_factory=WriteEntriesOpt)


@dataclass(frozen=True)
class OpCompactLog(Generic[T]):
    entries: list[LogEntry[T]]


@dataclass(frozen=True)
class OpApplySnapshot(Generic[T]):
    snapshot: SnapshotRange[T]


NonVolatileWrite = Union[
    OpUpConfCommitted,
    OpUpConfNew,
    OpUpCommitIndex,
    OpUpTermVotedFor,
    OpWriteLog,
    OpCompactLog,
    OpApplySnapshot,
]