from __future__ import annotations

import pytest

from dxftag.chain import ChainNode, RecordChain, append, free_chain, free_node, last
from dxftag.errors import InvariantViolation
from dxftag.records import Line, Point


def _lines(count: int) -> list[Line]:
    return [Line(start=Point(float(i), 0.0, 0.0)) for i in range(count)]


def test_append_preserves_read_order() -> None:
    chain: RecordChain[Line] = RecordChain("LINE")
    records = _lines(4)
    for record in records:
        append(chain, record)

    assert list(chain) == records
    assert len(chain) == 4
    assert chain
    assert last(chain).record is records[-1]


def test_last_of_empty_chain() -> None:
    chain: RecordChain[Line] = RecordChain()

    assert last(chain) is None
    assert not chain
    assert len(chain) == 0


def test_free_node_with_successor_is_rejected() -> None:
    chain: RecordChain[Line] = RecordChain()
    first = chain.append(Line())
    chain.append(Line())

    with pytest.raises(InvariantViolation):
        free_node(first)
    assert not first.released


def test_free_node_twice_is_rejected() -> None:
    node = ChainNode(Line())
    free_node(node)

    assert node.released
    assert node.record is None
    with pytest.raises(InvariantViolation):
        free_node(node)


def test_free_chain_releases_every_node() -> None:
    chain: RecordChain[Line] = RecordChain("LINE")
    for record in _lines(5):
        chain.append(record)
    nodes = list(chain.nodes())

    released = free_chain(chain)

    assert released == 5
    assert all(node.released for node in nodes)
    assert all(node.next is None for node in nodes)
    assert chain.head is None
    assert last(chain) is None
    assert len(chain) == 0


def test_chain_is_reusable_after_free() -> None:
    chain: RecordChain[Line] = RecordChain()
    chain.append(Line())
    chain.free_chain()

    record = Line()
    chain.append(record)

    assert list(chain) == [record]


def test_append_missing_record_is_rejected() -> None:
    with pytest.raises(InvariantViolation):
        RecordChain().append(None)
