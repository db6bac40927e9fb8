"""Dependency graph helpers."""


class CircularDependencyError(Exception):
    """Raised when the dependency graph has a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Circular dependency: {' → '.join(cycle)}")


def topological_sort(dependencies: dict[str, list[str]]) -> list[str]:
    """Order nodes so every node comes after the nodes it depends on.

    Nodes keep their input order whenever the graph allows it. Dependencies
    on nodes absent from the mapping are ignored; the caller checks those.

    Args:
        dependencies: node → nodes it depends on

    Returns:
        Nodes in dependency order

    Raises:
        CircularDependencyError: If a cycle is found

    Example:
        >>> topological_sort({"leaf": ["mid"], "mid": ["root"], "root": []})
        ['root', 'mid', 'leaf']
    """
    order: list[str] = []
    done: set[str] = set()
    visiting: list[str] = []

    def visit(node: str) -> None:
        if node in done:
            return
        if node in visiting:
            raise CircularDependencyError(visiting[visiting.index(node):] + [node])
        visiting.append(node)
        for dep in dependencies.get(node, []):
            if dep in dependencies:
                visit(dep)
        visiting.pop()
        done.add(node)
        order.append(node)

    for node in dependencies:
        visit(node)
    return order
