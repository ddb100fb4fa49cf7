# raftcore

This package holds the data model and the quorum rules of a Raft consensus
node. It supports joint-consensus reconfiguration, in which a leader runs under
a committed configuration and a new configuration at the same time.

## Install

```
pip install raftcore
pip install "raftcore[test]"   # with the test dependencies
```

## Modules

### `raftcore.conf`: cluster configuration

- `ConfVersion(term, version, index)`. Equality, hashing and ordering use only
  `term` and `version`. `index` is the commit index at reconfiguration time.
  It has `to_dict()` and `from_dict()`.
- `ConfVersionPair` holds the committed version and the new version of a node.
- `NodeInfo(node_id, can_vote)` and `NodeAddr(node_id, addr, port)`.
- `ConfNode` holds a `conf_version`, a voter set `nid_vote` and a log-replica
  set `nid_log`. Both sets are frozensets.
- `ConfValue` holds the settings of one node.
  - `ConfValue.create(...)` fills in a timeout of 500 ticks, a 50 ms tick and
    10 entries per compaction.
  - `add_peer(node_id, can_vote)` adds a peer.
  - It has `to_dict()` and `from_dict()`.
- `ConfNodeValue.from_value(conf_value, term, version, commit_index)` builds
  the node sets from the peers in a `ConfValue`. `nid_vote()` returns the voters
  sorted. `term_version()` returns the version.
- `RaftConf` holds `conf_committed` and `conf_new`.
  - `is_reconfig_ongoing()` is true while their versions differ.
  - `node_id()` returns the node id from the committed settings.

### `raftcore.log`: log and storage types

- `RaftRole` is one of `LEADER`, `FOLLOWER`, `CANDIDATE` or `LEARNER`.
- `TermIndex` is a `(term, index)` position in the log.
- `LogEntry(term, index, value)`. `map(f)` transforms the value.
- `SnapshotRange` covers `begin_index` to `end_index` with a frozenset of
  entries.
  - `to_value()` returns the entries sorted by index.
  - `map(f)` transforms the values.
  - `to_snapshot_index_term()` returns the term and index of the last entry.
    It raises `ValueError` if the highest entry index is not `end_index`.
- `Snapshot(index, term, entries)`.
- `WriteEntriesOpt` and `WriteSnapshotOpt` are the truncation options.
- The non-volatile write operations are `OpUpConfCommitted`, `OpUpConfNew`,
  `OpUpCommitIndex`, `OpUpTermVotedFor`, `OpWriteLog`, `OpCompactLog` and
  `OpApplySnapshot`. The `NonVolatileWrite` union groups them.

### `raftcore.quorum`: majority checks

- `quorum_agree_vote` decides whether a candidate has a majority of votes for
  the current term.
- `quorum_agree_match_index` returns the highest log index that a majority has
  replicated.
- `quorum_check_conf_term_version` decides whether a majority has the leader's
  configuration version.
- `quorum_check_term_commit_index` decides whether a majority is in the
  leader's term and has committed at least a given index.
- `majority_agree_index(indexes, nodes_num)` returns the index reached by a
  majority. It returns 0 unless exactly `nodes_num` indexes are given.

`quorum_agree_vote` and `quorum_agree_match_index` take the committed
configuration and the new one. While their versions differ, the check must
pass in both configurations. For the match index, the lower of the two results
is returned.

### `raftcore.messages`: wire and test-driver messages

- Vote and pre-vote messages: `MVoteReq`, `MVoteResp`, `PreVoteReq` and
  `PreVoteResp`.
- Append and apply messages: `MAppendReq`, `MAppendResp`, `MApplyReq` and
  `MApplyResp`.
- Client messages: `MClientReq` and `MClientResp`. The `error` codes are
  `RCR_OK`, `RCR_NOT_LEADER` and `RCR_ERR_RESP`.
- Configuration messages: `MUpdateConfReq`, `MUpdateConfResp` and
  `MDTMUpdateConfReq`. `MUpdateConfReq.to_dtm_msg()` keeps the term and the
  node sets and drops the node settings.
- Deterministic-testing messages:
  - `MRaftState` is a full state record of a node.
  - `MUpdateConf` holds the voter and log-replica sets of a configuration
    change.
  - `MDTMTesting(kind, payload)` is a test-driver action, where `kind` is a
    `DTMKind`. It raises `TypeError` when the payload does not fit the kind.
- `to_dtm_outgoing(message)` wraps an `MUpdateConfReq` as an
  `MDTMTesting` of kind `UPDATE_CONF_REQ`. It returns every other message
  unchanged.

## Example

```python
from raftcore.conf import ConfValue, ConfNodeValue
from raftcore.quorum import quorum_agree_vote, quorum_agree_match_index

value = ConfValue.create("demo", 1, "/tmp/raft_1.db", "127.0.0.1", 9001)
for nid in (1, 2, 3):
    value.add_peer(nid, True)

conf = ConfNodeValue.from_value(value, term=1, version=1, commit_index=0)

# The leader (node 1) plus node 2 form a majority of three voters.
assert quorum_agree_vote(1, 5, {2: 5}, conf.node, conf.node)

# The highest index that a majority has replicated.
assert quorum_agree_match_index(1, 10, {2: 7, 3: 4}, conf.node, conf.node) == 7
```

## What it does not do

This package has types and pure decision functions only. It does not include
the following:

- a running raft node;
- a network transport;
- a storage backend that applies the write operations;
- a state-machine loop that drives elections and replication;
- a command-line program.

## Tests

```
pytest
```