"""Nested-set invariant checks.

A consistent forest of ``n`` albums satisfies:

* ``left < right`` for every album;
* any two intervals are either disjoint or strictly nested;
* an album's ``parent_id`` is the nearest album whose interval contains it
  (``None`` when no interval contains it);
* the bounds of all albums are exactly the positions ``1 .. 2n``.
"""

from __future__ import annotations

from typing import Iterable

from ..models import AlbumNode


def check_invariants(nodes: Iterable[AlbumNode]) -> list[str]:
    """Return a description of every violated invariant; empty when consistent."""

    nodes = sorted(nodes, key=lambda node: (node.left, node.id))
    by_id = {node.id: node for node in nodes}
    violations: list[str] = []

    for node in nodes:
        if node.left >= node.right:
            violations.append(f"album {node.id}: left {node.left} is not below right {node.right}")

    bounds = sorted(bound for node in nodes for bound in (node.left, node.right))
    if bounds != list(range(1, 2 * len(nodes) + 1)):
        violations.append(f"bounds of {len(nodes)} albums do not cover 1..{2 * len(nodes)} exactly")

    # Pre-order sweep; the stack holds the chain of open enclosing intervals.
    stack: list[AlbumNode] = []
    for node in nodes:
        while stack and stack[-1].right < node.left:
            stack.pop()
        enclosing = stack[-1] if stack else None
        if enclosing is not None and node.right > enclosing.right:
            violations.append(
                f"album {node.id} [{node.left}, {node.right}] partially overlaps "
                f"album {enclosing.id} [{enclosing.left}, {enclosing.right}]"
            )
        expected_parent = enclosing.id if enclosing is not None else None
        if node.parent_id != expected_parent:
            if node.parent_id is not None and node.parent_id not in by_id:
                violations.append(f"album {node.id} references missing parent {node.parent_id}")
            else:
                violations.append(
                    f"album {node.id} has parent_id {node.parent_id} "
                    f"but its nearest enclosing album is {expected_parent}"
                )
        stack.append(node)

    return violations


__all__ = ["check_invariants"]
