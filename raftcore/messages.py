"""Messages exchanged between raft nodes and with the test driver."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar, Union

from raftcore.conf import ConfNode, ConfNodeValue, ConfVersion, ConfVersionPair
from raftcore.log import LogEntry, RaftRole, Snapshot, TermIndex

T = TypeVar("T")

RAFT = "Raft"
RAFT_FUZZY = "RAFT_FUZZY"

RCR_OK = 0
RCR_NOT_LEADER = 1
RCR_ERR_RESP = 2


@dataclass(frozen=True)
class MVoteReq:
    term: int
    last_log_term: int
    last_log_index: int


@dataclass(frozen=True)
class MVoteResp:
    term: int
    vote_granted: bool


@dataclass(frozen=True)
class PreVoteReq:
    source_nid: int
    request_term: int
    last_log_term: int
    last_log_index: int


@dataclass(frozen=True)
class PreVoteResp:
    source_nid: int
    request_term: int
    vote_granted: bool


@dataclass(frozen=True)
class MAppendReq(Generic[T]):
    term: int
    prev_log_index: int
    prev_log_term: int
    log_entries: tuple[LogEntry[T], ...]
    commit_index: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_entries", tuple(self.log_entries))


@dataclass(frozen=True)
class MAppendResp:
    term: int
    append_success: bool
    commit_index: int
    match_index: int
    next_index: int


@dataclass(frozen=True)
class MApplyReq(Generic[T]):
    term: int
    id: str
    begin_index: int
    end_index: int
    snapshot: Snapshot[T] = field(default_factory=Snapshot)


@dataclass(frozen=True)
class MApplyResp:
    term: int
    match_index: int
    id: str


@dataclass(frozen=True)
class MClientReq(Generic[T]):
    id: str
    value: T
    source_id: Optional[int] = None
    wait_write_local: bool = False
    wait_commit: bool = False
    from_client_request: bool = False


@dataclass(frozen=True)
class MClientResp:
    id: str
    source_id: int
    index: int
    term: int
    error: int = RCR_OK
    info: str = ""


@dataclass(frozen=True)
class MDTMUpdateConfReq:
    """Configuration update as seen by the test driver: node sets only."""

    term: int
    conf_committed: ConfNode
    conf_new: ConfNode


@dataclass(frozen=True)
class MUpdateConfReq:
    term: int
    conf_committed: ConfNodeValue
    conf_new: ConfNodeValue

    def to_dtm_msg(self) -> MDTMUpdateConfReq:
        """Strip node settings, keeping the term and node sets."""
        return MDTMUpdateConfReq(
            term=self.term,
            conf_committed=self.conf_committed.node,
            conf_new=self.conf_new.node,
        )


@dataclass(frozen=True)
class MUpdateConfResp:
    term: int
    conf_committed: ConfVersion
    conf_new: ConfVersion


@dataclass(frozen=True)
class MUpdateConf:
    nid_vote: frozenset[int] = frozenset()
    nid_log: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nid_vote", frozenset(self.nid_vote))
        object.__setattr__(self, "nid_log", frozenset(self.nid_log))


@dataclass
class MRaftState(Generic[T]):
    """A full snapshot of a node's raft state, used to set up and check tests."""

    role: RaftRole = RaftRole.FOLLOWER
    current_term: int = 0
    log: list[LogEntry[T]] = field(default_factory=list)
    snapshot: Snapshot[T] = field(default_factory=Snapshot)
    voted_for: Optional[int] = None
    commit_index: int = 0
    conf_committed: ConfNode = field(default_factory=ConfNode)
    conf_new: ConfNode = field(default_factory=ConfNode)
    follower_vote_granted: dict[int, int] = field(default_factory=dict)
    follower_next_index: dict[int, int] = field(default_factory=dict)
    follower_match_index: dict[int, int] = field(default_factory=dict)
    follower_term_commit_index: dict[int, TermIndex] = field(default_factory=dict)
    follower_conf: dict[int, ConfVersionPair] = field(default_factory=dict)


class DTMKind(enum.Enum):
    SETUP = "Setup"
    CHECK = "Check"
    REQUEST_VOTE = "RequestVote"
    BECOME_LEADER = "BecomeLeader"
    APPEND_LOG = "AppendLog"
    CLIENT_WRITE_LOG = "ClientWriteLog"
    RESTART = "Restart"
    LOG_COMPACTION = "LogCompaction"
    UPDATE_CONF_BEGIN = "UpdateConfBegin"
    UPDATE_CONF_COMMIT = "UpdateConfCommit"
    SEND_UPDATE_CONF = "SendUpdateConf"
    UPDATE_CONF_REQ = "UpdateConfReq"


_PAYLOAD_TYPES: dict[DTMKind, Optional[type]] = {
    DTMKind.SETUP: MRaftState,
    DTMKind.CHECK: MRaftState,
    DTMKind.REQUEST_VOTE: None,
    DTMKind.BECOME_LEADER: None,
    DTMKind.APPEND_LOG: None,
    DTMKind.RESTART: None,
    DTMKind.LOG_COMPACTION: int,
    DTMKind.UPDATE_CONF_BEGIN: MUpdateConf,
    DTMKind.UPDATE_CONF_COMMIT: None,
    DTMKind.SEND_UPDATE_CONF: None,
    DTMKind.UPDATE_CONF_REQ: MDTMUpdateConfReq,
}


@dataclass(frozen=True)
class MDTMTesting(Generic[T]):
    """A deterministic-testing action; ``payload`` depends on ``kind``."""

    kind: DTMKind
    payload: Any = None

    def __post_init__(self) -> None:
        if self.kind is DTMKind.CLIENT_WRITE_LOG:
            return
        expected = _PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.payload is not None:
                raise TypeError(f"{self.kind.value} takes no payload")
        elif not isinstance(self.payload, expected) or isinstance(self.payload, bool):
            raise TypeError(f"{self.kind.value} requires a {expected.__name__} payload")


RaftMessage = Union[
    PreVoteReq,
    PreVoteResp,
    MVoteReq,
    MVoteResp,
    MAppendReq,
    MAppendResp,
    MApplyReq,
    MApplyResp,
    MClientReq,
    MClientResp,
    MUpdateConfReq,
    MUpdateConfResp,
    MDTMTesting,
]


def to_dtm_outgoing(message: RaftMessage) -> RaftMessage:
    """Replace a configuration update with its test-driver form before sending."""
    if isinstance(message, MUpdateConfReq):
        return MDTMTesting(kind=DTMKind.UPDATE_CONF_REQ, payload=message.to_dtm_msg())
    return message