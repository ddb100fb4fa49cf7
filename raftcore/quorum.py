"""Quorum decisions for elections, commit indexes and re-configuration."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

from raftcore.conf import ConfNode, ConfVersion
from raftcore.log import TermIndex


def _count(nodes: Iterable[int], exclude: int, cond: Callable[[int], bool]) -> int:
    return sum(1 for nid in nodes if nid != exclude and cond(nid))


def _indexes(nodes: Iterable[int], exclude: int, get_index: Callable[[int], int]) -> list[int]:
    return [get_index(nid) for nid in nodes if nid != exclude]


def majority_agree_index(indexes: Iterable[int], nodes_num: int) -> int:
    """Highest index reached by a majority of ``nodes_num`` nodes.

    Returns 0 unless exactly ``nodes_num`` indexes are given.
    """
    ordered = sorted(indexes, reverse=True)
    if len(ordered) != nodes_num or not ordered:
        return 0
    n = len(ordered) // 2 + 1
    return ordered[n - 1]


def quorum_agree_vote(
    leader_nid: int,
    current_term: int,
    follower_vote_granted: Mapping[int, int],
    conf_committed: ConfNode,
    conf_new: ConfNode,
) -> bool:
    """Whether the candidate holds a majority of votes in every active configuration."""

    def granted(nid: int) -> bool:
        return follower_vote_granted.get(nid) == current_term

    def majority(voters: frozenset[int]) -> bool:
        agreed = _count(voters, leader_nid, granted) + 1
        return agreed * 2 > len(voters)

    if conf_committed.conf_version == conf_new.conf_version:
        return majority(conf_committed.nid_vote)
    return majority(conf_committed.nid_vote) and majority(conf_new.nid_vote)


def quorum_agree_match_index(
    leader_nid: int,
    leader_last_index: int,
    follower_match_index: Mapping[int, int],
    conf_committed: ConfNode,
    conf_new: ConfNode,
) -> int:
    """The log index replicated on a majority of every active configuration."""

    def match_index(nid: int) -> int:
        return follower_match_index.get(nid, 0)

    def agreed(voters: frozenset[int]) -> int:
        indexes = _indexes(sorted(voters), leader_nid, match_index)
        indexes.append(leader_last_index)
        return majority_agree_index(indexes, len(voters))

    committed = agreed(conf_committed.nid_vote)
    if conf_committed.conf_version == conf_new.conf_version:
        return committed
    return min(committed, agreed(conf_new.nid_vote))


def quorum_check_conf_term_version(
    leader_nid: int,
    nid_set: Iterable[int],
    term_version: ConfVersion,
    follower_conf: Mapping[int, ConfVersion],
) -> bool:
    """Whether a majority of ``nid_set`` has the leader's configuration version."""
    nodes = list(nid_set)

    def same_version(nid: int) -> bool:
        version = follower_conf.get(nid)
        return version is not None and version == term_version

    agreed = _count(nodes, leader_nid, same_version) + 1
    return agreed * 2 > len(nodes)


def quorum_check_term_commit_index(
    leader_nid: int,
    nid_set: Iterable[int],
    leader_term: int,
    leader_conf_commit_index: int,
    follower_term_and_committed_index: Mapping[int, TermIndex],
) -> bool:
    """Whether a majority is in the leader's term and has committed far enough."""
    nodes = list(nid_set)

    def caught_up(nid: int) -> bool:
        term_index = follower_term_and_committed_index.get(nid)
        return (
            term_index is not None
            and term_index.term == leader_term
            and term_index.index >= leader_conf_commit_index
        )

    agreed = _count(nodes, leader_nid, caught_up) + 1
    return agreed * 2 > len(nodes)