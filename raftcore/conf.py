"""Cluster configuration: versions, node sets and per-node settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any, Iterable

DEFAULT_TIMEOUT_MAX_TICK = 500
DEFAULT_MILLISECOND_TICK = 50
DEFAULT_MAX_COMPACT_ENTRIES = 10


@total_ordering
@dataclass(frozen=True, eq=False)
class ConfVersion:
    """The ``(term, version, index)`` triple of a configuration.

    Equality, hashing and ordering consider only ``term`` and ``version``;
    ``index`` is the log commit index at the time of re-configuration.
    """

    term: int = 0
    version: int = 0
    index: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfVersion):
            return NotImplemented
        return (self.term, self.version) == (other.term, other.version)

    def __hash__(self) -> int:
        return hash((self.term, self.version))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ConfVersion):
            return NotImplemented
        return (self.term, self.version) < (other.term, other.version)

    def to_dict(self) -> dict[str, int]:
        return {"term": self.term, "version": self.version, "index": self.index}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfVersion:
        return cls(
            term=int(data["term"]),
            version=int(data["version"]),
            index=int(data["index"]),
        )


@dataclass(frozen=True)
class ConfVersionPair:
    """Versions of the committed and the new configuration of a node."""

    conf_committed: ConfVersion = field(default_factory=ConfVersion)
    conf_new: ConfVersion = field(default_factory=ConfVersion)


@dataclass(frozen=True)
class NodeInfo:
    """A peer and whether it takes part in voting."""

    node_id: int
    can_vote: bool

    def to_dict(self) -> dict[str, Any]:
        return {"node_id": self.node_id, "can_vote": self.can_vote}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodeInfo:
        return cls(node_id=int(data["node_id"]), can_vote=bool(data["can_vote"]))


@dataclass(frozen=True)
class NodeAddr:
    """Network address of a node."""

    node_id: int
    addr: str
    port: int


@dataclass(frozen=True)
class ConfNode:
    """Node sets of a configuration.

    ``nid_vote`` holds the nodes that may vote and is a subset of ``nid_log``,
    the nodes that replicate the log.
    """

    conf_version: ConfVersion = field(default_factory=ConfVersion)
    nid_vote: frozenset[int] = frozenset()
    nid_log: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nid_vote", frozenset(self.nid_vote))
        object.__setattr__(self, "nid_log", frozenset(self.nid_log))

    def to_dict(self) -> dict[str, Any]:
        return {
            "conf_version": self.conf_version.to_dict(),
            "nid_vote": sorted(self.nid_vote),
            "nid_log": sorted(self.nid_log),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfNode:
        return cls(
            conf_version=ConfVersion.from_dict(data["conf_version"]),
            nid_vote=frozenset(int(n) for n in data["nid_vote"]),
            nid_log=frozenset(int(n) for n in data["nid_log"]),
        )


@dataclass
class ConfValue:
    """Settings of a single raft node."""

    cluster_name: str = ""
    storage_path: str = ""
    node_id: int = 0
    bind_address: str = ""
    bind_port: int = 0
    timeout_max_tick: int = 0
    millisecond_tick: int = 0
    max_compact_entries: int = 0
    send_value_to_leader: bool = False
    node_peer: list[NodeInfo] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        cluster_name: str,
        node_id: int,
        storage_path: str,
        address: str,
        port: int,
    ) -> ConfValue:
        """Build settings with the standard tick and compaction defaults."""
        return cls(
            cluster_name=cluster_name,
            storage_path=storage_path,
            node_id=node_id,
            bind_address=address,
            bind_port=port,
            timeout_max_tick=DEFAULT_TIMEOUT_MAX_TICK,
            millisecond_tick=DEFAULT_MILLISECOND_TICK,
            max_compact_entries=DEFAULT_MAX_COMPACT_ENTRIES,
            send_value_to_leader=False,
            node_peer=[],
        )

    def add_peer(self, node_id: int, can_vote: bool) -> None:
        self.node_peer.append(NodeInfo(node_id=node_id, can_vote=can_vote))

    def to_dict(self) -> dict[str, Any]:
        return {
            "cluster_name": self.cluster_name,
            "storage_path": self.storage_path,
            "node_id": self.node_id,
            "bind_address": self.bind_address,
            "bind_port": self.bind_port,
            "timeout_max_tick": self.timeout_max_tick,
            "millisecond_tick": self.millisecond_tick,
            "max_compact_entries": self.max_compact_entries,
            "send_value_to_leader": self.send_value_to_leader,
            "node_peer": [peer.to_dict() for peer in self.node_peer],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfValue:
        return cls(
            cluster_name=str(data["cluster_name"]),
            storage_path=str(data["storage_path"]),
            node_id=int(data["node_id"]),
            bind_address=str(data["bind_address"]),
            bind_port=int(data["bind_port"]),
            timeout_max_tick=int(data["timeout_max_tick"]),
            millisecond_tick=int(data["millisecond_tick"]),
            max_compact_entries=int(data["max_compact_entries"]),
            send_value_to_leader=bool(data["send_value_to_leader"]),
            node_peer=[NodeInfo.from_dict(p) for p in data["node_peer"]],
        )


def _split_peers(peers: Iterable[NodeInfo]) -> tuple[frozenset[int], frozenset[int]]:
    peers = list(peers)
    vote = frozenset(p.node_id for p in peers if p.can_vote)
    log = frozenset(p.node_id for p in peers)
    return vote, log


@dataclass
class ConfNodeValue:
    """A configuration's node sets together with the node settings."""

    node: ConfNode = field(default_factory=ConfNode)
    value: ConfValue = field(default_factory=ConfValue)

    @classmethod
    def from_value(
        cls,
        conf_value: ConfValue,
        term: int,
        version: int,
        commit_index: int,
    ) -> ConfNodeValue:
        """Derive node sets from the peers listed in ``conf_value``."""
        nid_vote, nid_log = _split_peers(conf_value.node_peer)
        node = ConfNode(
            conf_version=ConfVersion(term=term, version=version, index=commit_index),
            nid_vote=nid_vote,
            nid_log=nid_log,
        )
        return cls(node=node, value=conf_value)

    def nid_vote(self) -> list[int]:
        return sorted(self.node.nid_vote)

    def term_version(self) -> ConfVersion:
        return self.node.conf_version


@dataclass
class RaftConf:
    """The committed configuration and the one being switched to."""

    conf_committed: ConfNodeValue = field(default_factory=ConfNodeValue)
    conf_new: ConfNodeValue = field(default_factory=ConfNodeValue)

    def is_reconfig_ongoing(self) -> bool:
        return self.conf_committed.term_version() != self.conf_new.term_version()

    def node_id(self) -> int:
        return self.conf_committed.value.node_id