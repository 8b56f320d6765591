"""simsweep.models.network

Edge-list files into networkx graphs.

File format:
- one edge per line, fields split on `sep` (lowercased first)
- blank lines and lines starting with `%` are skipped
- a line naming both `from` and `to` is a header; it remaps the from/to/info columns
- without a header, columns are from, to, info (info optional)

The result is a MultiDiGraph: a pair listed twice gives two parallel edges.
Edges carry their label in the `info` attribute, which is what the edge-list
results channel writes out.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import networkx as nx

from simsweep.core.exceptions import InputFileError


@dataclass(eq=False, slots=True)
class Node:
    """Placeholder for a node named in the file but not supplied by the caller."""

    name: str
    obj: Any = field(default=None)

    def __str__(self) -> str:
        return self.name


def index_nodes(items: Sequence[Any | None]) -> dict[str, Any]:
    """Name existing objects by their position, skipping empty slots."""

    return {str(i): obj for i, obj in enumerate(items) if obj is not None}


def read_network(path: str | Path, sep: str = ",", nodes: dict[str, Any] | None = None) -> nx.MultiDiGraph:
    p = Path(path)
    known: dict[str, Any] = nodes if nodes is not None else {}
    net = nx.MultiDiGraph()

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise InputFileError(f"Invalid network file: {p}") from e

    cols = (0, 1, 2)
    for line in text.splitlines():
        if not line or line.startswith("%"):
            continue
        row = [c.strip() for c in line.lower().split(sep)]
        if len(row) < 2:
            continue
        if "to" in row and "from" in row:
            cols = (row.index("from"), row.index("to"), row.index("info") if "info" in row else -1)
            continue
        if max(cols[0], cols[1]) >= len(row):
            continue

        ends = []
        for c in cols[:2]:
            name = row[c]
            n = known.get(name)
            if n is None:
                n = Node(name)
                known[name] = n
            ends.append(n)

        info = row[cols[2]] if -1 < cols[2] < len(row) else ""
        net.add_edge(ends[0], ends[1], info=info)

    return net


def iter_edges(graph: Any) -> list[tuple[str, str, str]]:
    """(from, to, info) for every edge. Raises TypeError if `graph` is not a networkx graph."""

    if not isinstance(graph, nx.Graph):
        raise TypeError(f"not a network: {type(graph).__name__}")
    out: list[tuple[str, str, str]] = []
    for u, v, data in graph.edges(data=True):
        info = data.get("info", "")
        out.append((str(u), str(v), "" if info is None else str(info)))
    return out
