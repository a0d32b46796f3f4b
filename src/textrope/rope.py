from __future__ import annotations
from collections.abc import Iterator
import logging
from typing import (
    Optional,
    Union,
)

from .errors import OutOfRangeError

logger = logging.getLogger(__name__)

# --- Configuration ---
REPR_PREVIEW: int = 32  # characters of text shown by repr()


# --- Core Node Structure ---
class Leaf:
    """A run of code points stored directly"""

    __slots__: tuple[str, ...] = ("text",)

    def __init__(self, text: str):
        self.text: str = text

    @property
    def weight(self) -> int:
        return len(self.text)

    @property
    def length(self) -> int:
        return len(self.text)

    def __len__(self):
        return len(self.text)


class Branch:
    """Two child trees, plus the length of the left one as the weight"""

    __slots__: tuple[str, ...] = ("left", "right", "weight", "length")

    def __init__(self, left: Node, right: Node):
        self.left: Node = left
        self.right: Node = right
        self.weight: int = left.length
        self.length: int = left.length + right.length

    def __len__(self):
        return self.length


Node = Union[Leaf, Branch]
ONode = Optional[Node]

_EMPTY: Leaf = Leaf("")


# --- Node Algorithms ---
# All of these walk with loops and explicit stacks. Nothing here rebalances,
# so a tree can be as deep as the number of concatenations that built it.


def _concat(a: ONode, b: ONode) -> ONode:
    """Join two trees without touching either of them"""
    if a is None or a.length == 0:
        return b
    if b is None or b.length == 0:
        return a
    return Branch(a, b)


def _index(node: Node, i: int) -> str:
    """Get the code point at 1-based position i"""
    while isinstance(node, Branch):
        if i > node.weight:
            i -= node.weight
            node = node.right
        else:
            node = node.left
    return node.text[i - 1]


def _report(node: Node, i: int, n: int) -> str:
    """Get n code points starting at 1-based position i"""
    parts: list[str] = []
    stack: list[tuple[Node, int, int]] = [(node, i, n)]

    while stack:
        node, i, n = stack.pop()
        while isinstance(node, Branch):
            if i > node.weight:
                i -= node.weight
                node = node.right
            elif node.weight >= i + n - 1:
                node = node.left
            else:
                # The run straddles the weight. Finish the left part first,
                # the right part waits on the stack starting at its position 1
                taken = node.weight - i + 1
                stack.append((node.right, 1, n - taken))
                node = node.left
                n = taken
        parts.append(node.text[i - 1 : i - 1 + n])

    return "".join(parts)


def _split(node: Node, i: int) -> tuple[Node, Node]:
    """Split the tree into [1, i] and [i + 1, len]

    Only the path from the root down to the split point is rebuilt. Every
    subtree hanging off that path is shared by the results.

    Args:
        node: The tree to split
        i: The split point, strictly inside the tree: 0 < i < node.length

    Returns:
        Node: The tree holding the first i code points
        Node: The tree holding the rest
    """
    # (branch, went_right)
    path: list[tuple[Branch, bool]] = []
    first: ONode
    second: ONode

    while True:
        if isinstance(node, Leaf):
            first, second = Leaf(node.text[:i]), Leaf(node.text[i:])
            break
        if i == node.weight:
            first, second = node.left, node.right
            break
        if i > node.weight:
            path.append((node, True))
            i -= node.weight
            node = node.right
        else:
            path.append((node, False))
            node = node.left

    for branch, went_right in reversed(path):
        if went_right:
            first = _concat(branch.left, first)
        else:
            second = _concat(second, branch.right)

    return _as_node(first), _as_node(second)


def _as_node(node: ONode) -> Node:
    return _EMPTY if node is None else node


def _leaves(root: Node) -> Iterator[str]:
    """Yield the text of every leaf, left to right"""
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            yield node.text
        else:
            # Push right first so left is processed first
            stack.append(node.right)
            stack.append(node.left)


def _depth(root: Node) -> int:
    """Height of the tree, a lone leaf has depth 0"""
    deepest = 0
    stack: list[tuple[Node, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            deepest = max(deepest, depth)
        else:
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
    return deepest


# --- Argument checks ---
def _check_int(operation: str, **values: int):
    for name, value in values.items():
        # bool is an int, but never a position
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"{operation}: {name} must be an int, not {type(value).__name__}"
            )


def _out_of_range(operation: str, detail: str, length: int) -> OutOfRangeError:
    logger.debug("Rejected %s: %s (rope length %d)", operation, detail, length)
    return OutOfRangeError(operation, detail, length)


def _check_span(operation: str, i: int, n: int, length: int):
    """Make sure the n code points starting at 1-based i exist"""
    _check_int(operation, i=i, n=n)
    if n < 0:
        raise _out_of_range(operation, f"negative count n={n}", length)
    if i < 1:
        raise _out_of_range(operation, f"start i={i} is before position 1", length)
    # An empty run may start just past the end
    if i + n - 1 > length:
        raise _out_of_range(
            operation, f"span i={i} n={n} runs past position {length}", length
        )


# --- Main Rope Class ---
class Rope:
    """Persistent sequence of code points with cheap concat and split

    No method changes a rope. Every operation hands back a new value that
    shares all untouched subtrees with its inputs, so a rope can be used
    again, and read from any number of threads, after taking part in an edit.

    Positions are 1-based, as in "character 1 of the document". The
    ``rope[k]`` and ``rope[a:b]`` forms follow the usual 0-based Python
    conventions on top of that.
    """

    __slots__: tuple[str, ...] = ("_root",)

    def __init__(self, text: str = ""):
        if not isinstance(text, str):
            raise TypeError(f"Rope text must be a str, not {type(text).__name__}")
        self._root: Node = Leaf(text) if text else _EMPTY

    @classmethod
    def _wrap(cls, node: ONode) -> Rope:
        rope = cls.__new__(cls)
        rope._root = _as_node(node)
        return rope

    @classmethod
    def from_bytes(cls, data: bytes, encoding: str = "utf8") -> Rope:
        """Build a rope from encoded text, counting code points not bytes"""
        return cls(data.decode(encoding))

    # --- Shape ---
    @property
    def root(self) -> Node:
        return self._root

    @property
    def length(self) -> int:
        return self._root.length

    @property
    def weight(self) -> int:
        return self._root.weight

    @property
    def is_leaf(self) -> bool:
        return isinstance(self._root, Leaf)

    @property
    def depth(self) -> int:
        return _depth(self._root)

    def __len__(self) -> int:
        return self._root.length

    def __bool__(self) -> bool:
        return self._root.length > 0

    # ------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------

    def index(self, i: int) -> str:
        """Get the code point at 1-based position i"""
        _check_int("index", i=i)
        if i < 1 or i > self.length:
            raise _out_of_range("index", f"position i={i}", self.length)
        return _index(self._root, i)

    def report(self, i: int, n: int) -> str:
        """Get the n code points starting at 1-based position i

        Asking for zero code points is allowed and gives an empty string.
        """
        _check_span("report", i, n, self.length)
        if n == 0:
            return ""
        return _report(self._root, i, n)

    def to_text(self) -> str:
        return "".join(_leaves(self._root))

    __str__ = to_text

    def leaves(self) -> Iterator[str]:
        """Yield the text of each non-empty leaf, in order"""
        for text in _leaves(self._root):
            if text:
                yield text

    def __iter__(self) -> Iterator[str]:
        for text in _leaves(self._root):
            yield from text

    def __getitem__(self, key: Union[int, slice]) -> str:
        if isinstance(key, slice):
            start, stop, step = key.indices(len(self))
            if step != 1:
                raise ValueError("Slice step must be 1")
            if stop <= start:
                return ""
            return _report(self._root, start + 1, stop - start)

        _check_int("getitem", key=key)
        pos = key + len(self) if key < 0 else key
        if pos < 0 or pos >= len(self):
            raise _out_of_range("getitem", f"key={key}", len(self))
        return _index(self._root, pos + 1)

    # ------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------

    def concat(self, other: Optional[Rope]) -> Rope:
        return concat(self, other)

    def __add__(self, other: Union[Rope, str]) -> Rope:
        if isinstance(other, str):
            other = Rope(other)
        if not isinstance(other, Rope):
            return NotImplemented
        return concat(self, other)

    def __radd__(self, other: str) -> Rope:
        if not isinstance(other, str):
            return NotImplemented
        return concat(Rope(other), self)

    def split(self, i: int) -> tuple[Rope, Rope]:
        """Split into the first i code points and the rest

        Split points at or before 0 give ``(empty, self)`` and split points at
        or past the end give ``(self, empty)``.
        """
        _check_int("split", i=i)
        if i <= 0:
            return Rope(), self
        if i >= self.length:
            return self, Rope()
        first, second = _split(self._root, i)
        return self._wrap(first), self._wrap(second)

    # ------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------

    def insert(self, i: int, text: Union[str, Rope]) -> Rope:
        """Insert text after the first i code points

        Inserting at 0 prepends and inserting at len(self) appends.
        """
        _check_int("insert", i=i)
        if i < 0 or i > self.length:
            raise _out_of_range("insert", f"position i={i}", self.length)
        piece = text if isinstance(text, Rope) else Rope(text)
        first, second = self.split(i)
        return concat(concat(first, piece), second)

    def delete(self, i: int, n: int) -> Rope:
        """Remove the n code points starting at 1-based position i"""
        _check_span("delete", i, n, self.length)
        if n == 0:
            return self
        first, rest = self.split(i - 1)
        _, tail = rest.split(n)
        return concat(first, tail)

    def substr(self, i: int, n: int) -> Rope:
        """Get the n code points starting at 1-based position i as a rope"""
        _check_span("substr", i, n, self.length)
        _, tail = self.split(i - 1)
        result, _ = tail.split(n)
        return result

    # ------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Rope):
            if self._root is other._root:
                return True
            return self.length == other.length and self.to_text() == other.to_text()
        if isinstance(other, str):
            return self.length == len(other) and self.to_text() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_text())

    def __repr__(self) -> str:
        if self.length <= REPR_PREVIEW:
            preview = self.to_text()
        else:
            preview = _report(self._root, 1, REPR_PREVIEW) + "..."
        return f"<Rope len: {self.length} {preview!r}>"

    def to_json(self, indent: Optional[int] = None) -> str:
        """Dump the tree shape as indented JSON, for debugging"""
        from .diagnostics import to_json

        return to_json(self, indent=indent)


def length(rope: Optional[Rope]) -> int:
    """Get the length of a rope, treating a missing rope as empty"""
    return 0 if rope is None else rope.length


def concat(a: Optional[Rope], b: Optional[Rope]) -> Rope:
    """Join two ropes into a new one, sharing both of them

    A missing or empty operand just gives back the other one.
    """
    for operand in (a, b):
        if operand is not None and not isinstance(operand, Rope):
            raise TypeError(f"Can only concat Rope, not {type(operand).__name__}")
    if a is None or a.length == 0:
        return Rope() if b is None else b
    if b is None or b.length == 0:
        return a
    return a._wrap(Branch(a._root, b._root))
