"""Union-Find (Disjoint Set Union) over record ids."""


class UnionFind:
    """Union-Find with path compression and union by rank.

    Used by the transitive clustering mode to turn pairwise matches into
    connected components. Components are reported in the order their first
    element was added, and elements keep insertion order within a component.

    Attributes
    ----------
    parent : dict[str, str]
        Parent pointers for each element.
    rank : dict[str, int]
        Rank (approximate tree height) for each root.
    """

    def __init__(self) -> None:
        """Initialize empty Union-Find structure."""
        self.parent: dict[str, str] = {}
        self.rank: dict[str, int] = {}

    def make_set(self, x: str) -> None:
        """Add ``x`` as a singleton set if it is not known yet."""
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def find(self, x: str) -> str:
        """Find root of the set containing ``x``, compressing the path.

        Parameters
        ----------
        x : str
            Element to find.

        Returns
        -------
        str
            Root of set containing x.
        """
        self.make_set(x)

        root = x
        while self.parent[root] != root:
            root = self.parent[root]

        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]

        return root

    def union(self, x: str, y: str) -> None:
        """Merge the sets containing ``x`` and ``y``."""
        root_x = self.find(x)
        root_y = self.find(y)

        if root_x == root_y:
            return

        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1

    def get_components(self) -> list[list[str]]:
        """Get all connected components, in insertion order.

        Returns
        -------
        list[list[str]]
            List of components, each component is a list of elements.
        """
        components: dict[str, list[str]] = {}
        for element in self.parent:
            components.setdefault(self.find(element), []).append(element)
        return list(components.values())
