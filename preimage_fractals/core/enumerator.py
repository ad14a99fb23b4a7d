"""
Bounded enumeration of iterated pre-images.

Starting from one point, the pre-images of the point are computed, then
the pre-images of those, and so on up to a maximum depth. The resulting
tree is returned flattened in pre-order. Its size grows like
``branching ** depth``, so every request is checked against a node
ceiling before any work is done.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .complex_number import ComplexValue, Number
from .fractal_types import ComplexFractal

logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 1 << 20


class NodeLimitExceededError(ValueError):
    """The projected number of tree nodes exceeds the configured ceiling."""


@dataclass(frozen=True)
class FractalNode:
    """
    A point of the pre-image tree.

    Nodes are identified by their position (``branch_id`` among the
    siblings, ``depth`` below the start point); the numeric value takes no
    part in equality since rounding makes it unreliable deep in the tree.
    Nodes are immutable: ``value`` hands out a fresh copy on every access.
    """

    branch_id: int
    depth: int
    _value: ComplexValue = field(compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_value', ComplexValue.of(self._value))

    @property
    def value(self) -> ComplexValue:
        return self._value.copy()

    @property
    def real(self) -> float:
        return self._value.real

    @property
    def imag(self) -> float:
        return self._value.imag


@dataclass
class EnumerationLimits:
    """Resource limits of an enumeration."""

    max_nodes: int = DEFAULT_MAX_NODES

    def validate(self) -> None:
        if self.max_nodes < 1:
            raise ValueError("max_nodes must be positive")


def projected_node_count(branching: int, max_depth: int, ceiling: Optional[int] = None) -> int:
    """
    Exact value of ``branching ** max_depth``.

    When ``ceiling`` is given the power is built up one factor at a time
    and the first partial product above the ceiling is returned, so huge
    depths are rejected without computing huge integers.

    Args:
        branching: Number of pre-images per point
        max_depth: Requested depth
        ceiling: Optional early-exit bound

    Returns:
        ``branching ** max_depth``, or a value above ``ceiling``
    """
    if branching < 0 or max_depth < 0:
        raise ValueError("branching and max_depth must not be negative")
    if ceiling is None or branching <= 1:
        return branching ** max_depth

    count = 1
    for _ in range(max_depth):
        count *= branching
        if count > ceiling:
            break
    return count


def _check_request(branching: int, max_depth: int, limits: EnumerationLimits) -> None:
    if max_depth < 1:
        raise ValueError("Maximal recursion depth should be at least 1")
    limits.validate()

    count = projected_node_count(branching, max_depth, limits.max_nodes)
    if count > limits.max_nodes:
        raise NodeLimitExceededError(
            f"Number of needed calculations ({branching}^{max_depth}) exceeds {limits.max_nodes}"
        )


def enumerate_pre_images(fractal: ComplexFractal, start: Number, max_depth: int,
                         limits: Optional[EnumerationLimits] = None) -> List[FractalNode]:
    """
    Expand ``start`` into the tree of its iterated pre-images.

    The start point is the node ``(0, 0)``; the children of a node at
    depth ``d`` are its pre-images, numbered in the order the fractal
    returns them, at depth ``d + 1``. Nodes are produced down to depth
    ``max_depth - 1``.

    Args:
        fractal: Generating map
        start: Root of the tree
        max_depth: Number of tree levels, at least 1
        limits: Node ceiling, ``EnumerationLimits()`` when omitted

    Returns:
        Nodes in pre-order

    Raises:
        ValueError: if ``max_depth < 1``
        NodeLimitExceededError: if ``dimensions() ** max_depth`` exceeds the ceiling
    """
    limits = limits or EnumerationLimits()
    _check_request(fractal.dimensions(), max_depth, limits)

    logger.info(f"Enumerating pre-images: {fractal.name}, depth {max_depth}")

    nodes: List[FractalNode] = []
    stack = [FractalNode(0, 0, start)]

    while stack:
        node = stack.pop()
        nodes.append(node)

        if node.depth + 1 < max_depth:
            children = fractal.pre_images(node.value)
            for k in range(len(children) - 1, -1, -1):
                stack.append(FractalNode(k, node.depth + 1, children[k]))

    logger.info(f"Enumerated {len(nodes)} points")
    return nodes


def enumerate_branching_tree(spread: int, max_depth: int,
                             limits: Optional[EnumerationLimits] = None) -> List[FractalNode]:
    """
    Build a self-similar tree with ``spread`` branches per node.

    The children of a node at depth ``d`` sit on a circle of radius
    ``0.5 ** d`` around it, at angles ``2*pi*k/spread + pi*d/spread``.

    Args:
        spread: Number of branches per node, at least 1
        max_depth: Number of tree levels, at least 1
        limits: Node ceiling, ``EnumerationLimits()`` when omitted

    Returns:
        Nodes in pre-order, starting at the origin
    """
    if spread < 1:
        raise ValueError("spread must be at least 1")
    limits = limits or EnumerationLimits()
    _check_request(spread, max_depth, limits)

    nodes: List[FractalNode] = []
    stack = [FractalNode(0, 0, ComplexValue.zero())]

    while stack:
        node = stack.pop()
        nodes.append(node)

        depth = node.depth
        if depth + 1 < max_depth:
            phi0 = math.pi / spread * depth
            r0 = 0.5 ** depth
            for k in range(spread - 1, -1, -1):
                phi = 2 * math.pi * k / spread + phi0
                w = ComplexValue.from_polar(r0, phi).add_(node.value)
                stack.append(FractalNode(k, depth + 1, w))

    return nodes


def node_values(nodes: Iterable[FractalNode]) -> List[ComplexValue]:
    """Plain values of the given nodes, in order."""
    return [node.value for node in nodes]
