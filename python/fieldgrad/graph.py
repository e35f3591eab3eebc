"""Computation graph for fieldgrad.

A ``Node`` holds a forward value, the gradient accumulated on it during a
backward pass, and the ordered list of nodes it was computed from. Gradient
propagation is delegated to an arity-specific ``BackwardFunction`` attached
by the dispatch layer.

``Node.backward`` orders the transitive dependency closure topologically,
seeds the root with the field's identity and pushes gradients toward the
leaves. Dependency lists are cleared once the pass completes, so a second
pass through any node of the same graph is rejected.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Optional, Sequence

from fieldgrad.field import field_traits

logger = logging.getLogger(__name__)

_creation_order = itertools.count()

_SECOND_PASS_MSG = "Trying to backward through the graph a second time."
_BACKWARD_MSG = (
    "Calling backward on a node that does not require grad and has no "
    "backward function defined."
)
_SET_REQUIRES_GRAD_MSG = "Changing requires_grad is possible only for leaf nodes."


class GraphError(RuntimeError):
    """Invalid operation on the computation graph."""


class BackwardError(GraphError):
    pass


class SecondBackwardError(BackwardError):
    pass


class LeafOnlyError(GraphError):
    pass


# ---------------------------------------------------------------------------
# Backward functions
# ---------------------------------------------------------------------------

class BackwardFunction:
    """Pushes a node's gradient into its dependencies.

    Subclasses turn the dependencies' forward values into one local partial
    derivative per dependency via ``partials``.
    """

    __slots__ = ("derivative",)

    arity = 0

    def __init__(self, derivative: Callable):
        self.derivative = derivative

    def partials(self, values: Sequence) -> Sequence:
        raise NotImplementedError

    def __call__(self, dependencies: Sequence[Node], source_grad) -> None:
        partials = self.partials([dep.data for dep in dependencies])
        if len(partials) != len(dependencies):
            raise GraphError(
                f"{type(self).__name__} produced {len(partials)} partials "
                f"for {len(dependencies)} dependencies"
            )
        for target, local in zip(dependencies, partials):
            if target.requires_backward():
                target.accumulate_grad(local * source_grad)

    def __repr__(self):
        name = getattr(self.derivative, "__qualname__", repr(self.derivative))
        return f"{type(self).__name__}({name})"


class UnaryBackward(BackwardFunction):
    __slots__ = ()

    arity = 1

    def partials(self, values):
        return (self.derivative(values[0]),)


class BinaryBackward(BackwardFunction):
    __slots__ = ()

    arity = 2

    def partials(self, values):
        return tuple(self.derivative(values[0], values[1]))


class ScalarBackward(BackwardFunction):
    """Unary derivative with an extra non-differentiable parameter."""

    __slots__ = ("parameter",)

    arity = 1

    def __init__(self, derivative: Callable, parameter):
        super().__init__(derivative)
        self.parameter = parameter

    def partials(self, values):
        return (self.derivative(values[0], self.parameter),)


class MultiBackward(BackwardFunction):
    __slots__ = ("arity",)

    def __init__(self, derivative: Callable, arity: int):
        if arity < 3:
            raise TypeError(f"MultiBackward needs arity >= 3, got {arity}")
        super().__init__(derivative)
        self.arity = arity

    def partials(self, values):
        return tuple(self.derivative(*values))


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

class Node:
    """Graph vertex. A node is a leaf iff it has no backward function."""

    __slots__ = ("data", "requires_grad", "grad", "backward_fn", "dependencies", "_order")

    def __init__(self, data, requires_grad: bool = False):
        self.data = data
        self.requires_grad = requires_grad
        self.grad = None
        self.backward_fn: Optional[BackwardFunction] = None
        self.dependencies: list[Node] = []
        self._order = next(_creation_order)

    @classmethod
    def derived(cls, data, backward_fn: BackwardFunction, dependencies: Sequence[Node]) -> Node:
        node = cls(data)
        for dep in dependencies:
            node.add_dependency(dep)
        node.set_backward_function(backward_fn)
        return node

    # ---- Construction ----

    def add_dependency(self, node: Node) -> None:
        if self.backward_fn is not None:
            raise GraphError("Dependencies can only be added before the backward function is set.")
        # A node may only depend on nodes that existed before it.
        if node._order >= self._order:
            raise GraphError("Dependency was created after the dependent node.")
        self.dependencies.append(node)

    def set_backward_function(self, backward_fn: BackwardFunction) -> None:
        if self.backward_fn is not None:
            raise GraphError("Backward function is already set.")
        if len(self.dependencies) != backward_fn.arity:
            raise GraphError(
                f"{type(backward_fn).__name__} expects {backward_fn.arity} dependencies, "
                f"node has {len(self.dependencies)}"
            )
        self.backward_fn = backward_fn

    # ---- Queries ----

    @property
    def is_leaf(self) -> bool:
        return self.backward_fn is None

    def requires_backward(self) -> bool:
        return not self.is_leaf or self.requires_grad

    def set_requires_grad(self, value: bool) -> None:
        if not self.is_leaf:
            raise LeafOnlyError(_SET_REQUIRES_GRAD_MSG)
        self.requires_grad = bool(value)

    # ---- Backward ----

    def accumulate_grad(self, contribution) -> None:
        # Stored gradients are never mutated in place; they may alias the
        # field identity.
        if self.grad is None:
            self.grad = contribution
        else:
            self.grad = self.grad + contribution

    def topological_sort(self) -> list[Node]:
        """Return this node and its dependency closure, consumers first.

        Depth-first in recording order, post-order reversed. Iterative so that
        long chains do not run into the recursion limit.
        """
        order = []
        visited = {self}
        stack = [(self, iter(self.dependencies))]
        while stack:
            node, deps = stack[-1]
            for dep in deps:
                if dep not in visited:
                    visited.add(dep)
                    stack.append((dep, iter(dep.dependencies)))
                    break
            else:
                stack.pop()
                order.append(node)
        order.reverse()
        return order

    def backward(self) -> None:
        if not self.requires_backward():
            raise BackwardError(_BACKWARD_MSG)

        order = self.topological_sort()
        pending = [node for node in order if not node.is_leaf]
        for node in pending:
            if not node.dependencies:
                raise SecondBackwardError(_SECOND_PASS_MSG)

        logger.debug(
            "backward pass: %d nodes, %d with backward functions", len(order), len(pending)
        )

        saved = [node.grad for node in order]
        try:
            self.grad = field_traits(type(self.data)).one
            for node in pending:
                node.backward_fn(node.dependencies, node.grad)
                if not node.requires_grad:
                    node.grad = None
        except BaseException:
            for node, grad in zip(order, saved):
                node.grad = grad
            raise

        for node in order:
            node.dependencies.clear()

    def __repr__(self):
        kind = "leaf" if self.is_leaf else repr(self.backward_fn)
        return f"Node(data={self.data!r}, {kind})"
