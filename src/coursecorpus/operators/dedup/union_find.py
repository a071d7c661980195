"""Disjoint-set structure for duplicate clustering."""

from collections.abc import Iterable


class UnionFind:
    """Union-find over string ids with path compression.

    The smaller id always becomes the root, so the final structure does not
    depend on the order in which unions are applied.
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._parent: dict[str, str] = {}
        for item in ids:
            self.add(item)

    def add(self, item: str) -> None:
        self._parent.setdefault(item, item)

    def find(self, item: str) -> str:
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, a: str, b: str) -> bool:
        """Merge the sets of a and b. Returns False if already merged."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if rb < ra:
            ra, rb = rb, ra
        self._parent[rb] = ra
        return True

    def connected(self, a: str, b: str) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> dict[str, list[str]]:
        """Root -> members, members in insertion order."""
        out: dict[str, list[str]] = {}
        for item in self._parent:
            out.setdefault(self.find(item), []).append(item)
        return out

    def __len__(self) -> int:
        return len(self._parent)
