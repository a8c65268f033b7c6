"""
Reactive Nodes
==============

A small dependency graph of memoized values.

    Source      - holds a value set from outside (raw frames, filter fields)
    Computed    - pure function of other nodes, memoized

Invalidation is push, recomputation is pull:
    Source.set() synchronously marks every transitive dependent dirty.
    Computed.get() recomputes only if dirty, then the node is clean again.

Several sets in a row therefore cost one recomputation per derived value,
paid on its next read.
"""

import operator
from typing import Any, Callable


class _Node:
    def __init__(self, name: str):
        self.name = name
        self._dependents: list["Computed"] = []

    def get(self) -> Any:
        raise NotImplementedError

    def _invalidate_dependents(self) -> None:
        for dependent in self._dependents:
            dependent.invalidate()


class Source(_Node):
    """
    Externally written value.

    Args:
        value: Initial value
        name: Label used in repr and logs
        equals: Comparison deciding whether a set() changes anything.
            Defaults to ==; pass operator.is_ for values whose == is not a
            plain bool (DataFrames).
    """

    def __init__(
        self,
        value: Any,
        name: str = "source",
        equals: Callable[[Any, Any], bool] = operator.eq,
    ):
        super().__init__(name)
        self._value = value
        self._equals = equals

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> bool:
        """Store value; return True if it differed and dependents were invalidated."""
        if self._equals(self._value, value):
            return False
        self._value = value
        self._invalidate_dependents()
        return True

    def __repr__(self) -> str:
        return f"Source({self.name})"


class Computed(_Node):
    """
    Memoized pure function of other nodes.

    fn receives the current values of deps, positionally and in order.
    """

    def __init__(self, fn: Callable[..., Any], *deps: _Node, name: str = "computed"):
        super().__init__(name)
        self._fn = fn
        self._deps = deps
        self._value: Any = None
        self._dirty = True
        self.recomputes = 0
        for dep in deps:
            dep._dependents.append(self)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def invalidate(self) -> None:
        # A dirty node's dependents are already dirty
        if self._dirty:
            return
        self._dirty = True
        self._invalidate_dependents()

    def get(self) -> Any:
        if self._dirty:
            self._value = self._fn(*(dep.get() for dep in self._deps))
            self._dirty = False
            self.recomputes += 1
        return self._value

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else "clean"
        return f"Computed({self.name}, {state})"
