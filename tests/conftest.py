import random

import pytest

from textrope import Rope, concat
from textrope.rope import Branch, Leaf


ALPHABET = "abcdefghij XYZ\né世界\U0001f30d"


def _build_rope(text: str, rng: random.Random) -> Rope:
    """Chop text into random pieces and glue them back in a random shape"""
    if len(text) <= 3 or rng.random() < 0.2:
        return Rope(text)
    cut = rng.randint(1, len(text) - 1)
    return concat(_build_rope(text[:cut], rng), _build_rope(text[cut:], rng))


def _random_text(rng: random.Random, size: int) -> str:
    return "".join(rng.choice(ALPHABET) for _ in range(size))


def _check_invariants(rope: Rope):
    """Walk every node and make sure weight and length add up"""
    stack = [rope.root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            assert node.weight == len(node.text)
            assert node.length == len(node.text)
        else:
            assert isinstance(node, Branch)
            assert node.weight == node.left.length
            assert node.length == node.left.length + node.right.length
            # concat never builds a branch around an empty child
            assert node.left.length > 0
            assert node.right.length > 0
            stack.append(node.left)
            stack.append(node.right)


@pytest.fixture
def abcdef():
    return Rope("abcdef")


@pytest.fixture
def pieces():
    """Four leaves joined as ((ab, cd), (ef, gh))"""
    a, b, c, d = Rope("ab"), Rope("cd"), Rope("ef"), Rope("gh")
    return a, b, c, d, concat(concat(a, b), concat(c, d))


@pytest.fixture
def build_rope():
    return _build_rope


@pytest.fixture
def random_text():
    return _random_text


@pytest.fixture
def check_invariants():
    return _check_invariants
