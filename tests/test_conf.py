import pytest

from raftcore.conf import (
    ConfNode,
    ConfNodeValue,
    ConfValue,
    ConfVersion,
    ConfVersionPair,
    NodeAddr,
    NodeInfo,
    RaftConf,
)


def test_conf_version_equality_ignores_index():
    assert ConfVersion(term=2, version=3, index=7) == ConfVersion(term=2, version=3, index=9)
    assert ConfVersion(term=2, version=3) != ConfVersion(term=2, version=4)


def test_conf_version_hash_consistent_with_eq():
    a = ConfVersion(term=1, version=1, index=5)
    b = ConfVersion(term=1, version=1, index=6)
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_conf_version_ordering_term_first():
    assert ConfVersion(term=1, version=9) < ConfVersion(term=2, version=0)
    assert ConfVersion(term=2, version=1) < ConfVersion(term=2, version=2)
    assert ConfVersion(term=3, version=0) >= ConfVersion(term=3, version=0, index=4)
    versions = [ConfVersion(3, 1), ConfVersion(1, 2), ConfVersion(1, 1)]
    assert sorted(versions) == [ConfVersion(1, 1), ConfVersion(1, 2), ConfVersion(3, 1)]


def test_conf_version_default_and_round_trip():
    assert ConfVersion().to_dict() == {"term": 0, "version": 0, "index": 0}
    v = ConfVersion(term=4, version=2, index=11)
    back = ConfVersion.from_dict(v.to_dict())
    assert back == v
    assert back.index == v.index


def test_conf_version_pair_equality():
    p1 = ConfVersionPair(ConfVersion(1, 1), ConfVersion(1, 2))
    p2 = ConfVersionPair(ConfVersion(1, 1, 3), ConfVersion(1, 2, 4))
    assert p1 == p2


def test_node_info_round_trip():
    info = NodeInfo(node_id=3, can_vote=False)
    assert NodeInfo.from_dict(info.to_dict()) == info


def test_node_addr_fields():
    addr = NodeAddr(node_id=1, addr="127.0.0.1", port=8000)
    assert (addr.node_id, addr.addr, addr.port) == (1, "127.0.0.1", 8000)


def test_conf_value_create_defaults():
    v = ConfValue.create("cluster", 1, "/tmp/db", "127.0.0.1", 9000)
    assert v.timeout_max_tick == 500
    assert v.millisecond_tick == 50
    assert v.max_compact_entries == 10
    assert v.send_value_to_leader is False
    assert v.node_peer == []
    assert v.bind_address == "127.0.0.1"
    assert v.bind_port == 9000


def test_conf_value_default_is_empty():
    v = ConfValue()
    assert v.cluster_name == ""
    assert v.node_id == 0
    assert v.node_peer == []


def test_conf_value_add_peer_and_round_trip():
    v = ConfValue.create("cluster", 1, "/tmp/db", "127.0.0.1", 9000)
    v.add_peer(1, True)
    v.add_peer(2, False)
    assert v.node_peer == [NodeInfo(1, True), NodeInfo(2, False)]
    assert ConfValue.from_dict(v.to_dict()) == v


def test_conf_node_value_from_value_splits_peers():
    v = ConfValue.create("cluster", 1, "/tmp/db", "127.0.0.1", 9000)
    v.add_peer(3, True)
    v.add_peer(1, True)
    v.add_peer(2, False)
    cnv = ConfNodeValue.from_value(v, term=5, version=6, commit_index=7)
    assert cnv.nid_vote() == [1, 3]
    assert cnv.node.nid_log == frozenset({1, 2, 3})
    assert cnv.node.nid_vote <= cnv.node.nid_log
    tv = cnv.term_version()
    assert (tv.term, tv.version, tv.index) == (5, 6, 7)
    assert cnv.value is v


def test_conf_node_round_trip_and_hash():
    node = ConfNode(ConfVersion(1, 2, 3), nid_vote=[1, 2], nid_log=[1, 2, 3])
    back = ConfNode.from_dict(node.to_dict())
    assert back == node
    assert hash(back) == hash(node)


def test_raft_conf_reconfig_ongoing():
    conf = RaftConf()
    assert conf.is_reconfig_ongoing() is False
    v = ConfValue.create("cluster", 4, "/tmp/db", "127.0.0.1", 9000)
    conf.conf_committed = ConfNodeValue.from_value(v, 1, 1, 0)
    conf.conf_new = ConfNodeValue.from_value(v, 1, 2, 0)
    assert conf.is_reconfig_ongoing() is True
    conf.conf_new = ConfNodeValue.from_value(v, 1, 1, 8)
    assert conf.is_reconfig_ongoing() is False
    assert conf.node_id() == 4


def test_conf_version_from_dict_missing_key():
    with pytest.raises(KeyError):
        ConfVersion.from_dict({"term": 1, "version": 2})