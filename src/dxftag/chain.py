from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

from .errors import InvariantViolation
from .log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(eq=False)
class ChainNode(Generic[T]):
    record: T
    next: "ChainNode[T] | None" = None
    released: bool = False


class RecordChain(Generic[T]):
    """Singly linked, read-ordered sequence of records of one kind.

    A chain owns its nodes. A node may only be released once its successor
    link is cleared; :meth:`free_chain` detaches each node before releasing it.
    """

    def __init__(self, kind: str | None = None) -> None:
        self.kind = kind
        self.head: ChainNode[T] | None = None
        self._tail: ChainNode[T] | None = None
        self._size = 0

    def append(self, record: T) -> ChainNode[T]:
        if record is None:
            raise InvariantViolation("cannot append a missing record to a chain")
        node = ChainNode(record)
        if self._tail is None:
            self.head = node
        else:
            self._tail.next = node
        self._tail = node
        self._size += 1
        return node

    def last(self) -> ChainNode[T] | None:
        node = self.head
        if node is None:
            return None
        while node.next is not None:
            node = node.next
        return node

    def nodes(self) -> Iterator[ChainNode[T]]:
        node = self.head
        while node is not None:
            yield node
            node = node.next

    def free_chain(self) -> int:
        """Release every node, head first. Returns the number of nodes released."""
        released = 0
        node = self.head
        self.head = None
        self._tail = None
        self._size = 0
        while node is not None:
            successor = node.next
            node.next = None
            free_node(node)
            released += 1
            node = successor
        if released:
            logger.debug("released %d %s node(s)", released, self.kind or "record")
        return released

    def __iter__(self) -> Iterator[T]:
        for node in self.nodes():
            yield node.record

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self.head is not None

    def __repr__(self) -> str:
        return f"RecordChain(kind={self.kind!r}, size={self._size})"


def free_node(node: ChainNode[Any]) -> None:
    if node.next is not None:
        raise InvariantViolation("cannot release a chain node whose successor is still linked")
    if node.released:
        raise InvariantViolation("chain node released twice")
    node.released = True
    node.record = None


def append(chain: RecordChain[T], record: T) -> ChainNode[T]:
    return chain.append(record)


def last(chain: RecordChain[T]) -> ChainNode[T] | None:
    return chain.last()


def free_chain(chain: RecordChain[Any]) -> int:
    return chain.free_chain()
