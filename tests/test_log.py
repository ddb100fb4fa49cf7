import pytest

from raftcore.conf import ConfValue, ConfVersion
from raftcore.log import (
    LogEntry,
    OpApplySnapshot,
    OpCompactLog,
    OpUpCommitIndex,
    OpUpConfCommitted,
    OpUpConfNew,
    OpUpTermVotedFor,
    OpWriteLog,
    RaftRole,
    Snapshot,
    SnapshotRange,
    TermIndex,
    WriteEntriesOpt,
    WriteSnapshotOpt,
)


def _range():
    return SnapshotRange(
        begin_index=0,
        end_index=2,
        entries=[
            LogEntry(term=1, index=1, value=1),
            LogEntry(term=1, index=2, value=2),
        ],
    )


def test_log_entry_map():
    e = LogEntry(term=0, index=0, value=100)
    e1 = e.map(str)
    assert e1 == LogEntry(term=0, index=0, value="100")
    assert e.value == 100


def test_log_entry_round_trip():
    e = LogEntry(term=3, index=4, value="x")
    assert LogEntry.from_dict(e.to_dict()) == e


def test_snapshot_range_index_term():
    assert _range().to_snapshot_index_term() == TermIndex(term=1, index=2)


def test_snapshot_range_to_value():
    values = _range().to_value()
    assert values == [LogEntry(1, 1, 1), LogEntry(1, 2, 2)]


def test_snapshot_range_map():
    sr2 = _range().map(str)
    assert sr2.begin_index == 0
    assert sr2.end_index == 2
    assert sr2.entries == frozenset({LogEntry(1, 1, "1"), LogEntry(1, 2, "2")})


def test_snapshot_range_empty():
    assert SnapshotRange().to_snapshot_index_term() == TermIndex(0, 0)
    assert SnapshotRange().to_value() == []


def test_snapshot_range_end_index_mismatch():
    sr = SnapshotRange(begin_index=0, end_index=5, entries=[LogEntry(1, 2, 2)])
    with pytest.raises(ValueError):
        sr.to_snapshot_index_term()


def test_snapshot_range_is_hashable_and_equal():
    reordered = SnapshotRange(
        begin_index=0,
        end_index=2,
        entries=[
            LogEntry(term=1, index=2, value=2),
            LogEntry(term=1, index=1, value=1),
        ],
    )
    shorter = SnapshotRange(
        begin_index=0,
        end_index=2,
        entries=[LogEntry(term=1, index=1, value=1)],
    )
    assert reordered == _range()
    assert len({_range(), reordered}) == 1
    assert shorter not in {_range(), reordered}
    assert reordered.map(str) == _range().map(str)


def test_snapshot_defaults():
    s = Snapshot()
    assert (s.index, s.term, s.entries) == (0, 0, frozenset())


def test_write_opt_defaults():
    opt = WriteEntriesOpt()
    assert opt.truncate_right is True
    assert opt.truncate_left is False
    snap_opt = WriteSnapshotOpt()
    assert snap_opt.truncate_left is True
    assert snap_opt.truncate_right is False


def test_raft_role_values():
    assert RaftRole("Leader") is RaftRole.LEADER
    assert {r.value for r in RaftRole} == {"Leader", "Follower", "Candidate", "Learner"}


def test_operations_carry_fields():
    conf = ConfValue.create("c", 1, "/tmp/db", "127.0.0.1", 9000)
    version = ConfVersion(1, 2, 3)
    assert OpUpConfCommitted(conf, version).version == version
    assert OpUpConfNew(conf, version).value is conf
    assert OpUpCommitIndex(7).index == 7
    assert OpUpTermVotedFor(term=2).voted_for is None
    entries = [LogEntry(1, 1, "a")]
    op = OpWriteLog(prev_index=0, entries=entries)
    assert op.opt == WriteEntriesOpt()
    assert OpCompactLog(entries).entries == entries
    assert OpApplySnapshot(_range()).snapshot.end_index == 2