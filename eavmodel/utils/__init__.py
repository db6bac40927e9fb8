"""Pure utility functions for eavmodel.

These have no dependency on eavmodel models and can be imported from
anywhere without circular import risk.

Modules:
- graphs: Topological sort and cycle detection
"""

from .graphs import topological_sort, CircularDependencyError

__all__ = [
    "topological_sort",
    "CircularDependencyError",
]
