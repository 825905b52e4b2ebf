import os
import dotenv
import pytest

from blocktree.block import BlockMap, BlockNode, TreeBuilder, TreeOperations

dotenv.load_dotenv()
os.environ.setdefault("BLOCKTREE_DEV_CHECKS", "1")


def sequential_keys(prefix: str = "new"):
    """Deterministic key generator: new1, new2, ... skipping keys in use."""
    counter = 0

    def generate(existing) -> str:
        nonlocal counter
        while True:
            counter += 1
            key = f"{prefix}{counter}"
            if key not in existing:
                return key

    return generate


@pytest.fixture
def ops():
    return TreeOperations(strict=True, key_generator=sequential_keys())


@pytest.fixture
def sibling_pair() -> BlockMap:
    """Two top-level leaves: A <-> B."""
    return BlockMap([
        BlockNode(key="A", text="alpha", type="header-one", depth=1, next_sibling="B"),
        BlockNode(key="B", text="beta", prev_sibling="A"),
    ])


@pytest.fixture
def list_with_orphan() -> BlockMap:
    """Container P with children X, Y, Z, plus a detached leaf W."""
    return BlockMap([
        BlockNode(key="P", children=("X", "Y", "Z")),
        BlockNode(key="X", text="x", parent="P", next_sibling="Y"),
        BlockNode(key="Y", text="y", parent="P", prev_sibling="X", next_sibling="Z"),
        BlockNode(key="Z", text="z", parent="P", prev_sibling="Y"),
        BlockNode(key="W", text="w"),
    ])


@pytest.fixture
def outline() -> BlockMap:
    """
    title
    section
      a
      group
        g1
        g2
      b
    footer
    """
    with TreeBuilder() as tree:
        tree("Title", key="title")
        with tree(key="section") as section:
            section("a", key="a")
            with section(key="group") as group:
                group("g1", key="g1")
                group("g2", key="g2")
            section("b", key="b")
        tree("Footer", key="footer")
    return tree.build()
