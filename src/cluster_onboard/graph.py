"""Conversion of digraph text to Graphviz.

The input is the line oriented format printed by ``ci-operator --print-graph``
and the ``digraph`` tool: each line holds an edge as two whitespace
separated node names. Log lines interleaved with the graph (containing
'INFO' or 'WARN') are ignored.
"""

import shutil
import subprocess
from collections.abc import Iterable, Sequence

import graphviz
from icecream import ic

from cluster_onboard.exceptions import BinaryNotFoundError, RenderError

DEFAULT_DOT_ARGS: tuple[str, ...] = ("-T", "png")

_LOG_MARKERS = ("INFO", "WARN")


def build_graph(lines: Iterable[str]) -> graphviz.Digraph:
    """Build a left to right graph from digraph edge lines.

    Node names are used as labels only; each node gets a generated ID in
    order of first appearance, so names containing ':' are not read as ports.

    Args:
        lines: Edge lines, e.g. ``"[images] src"``.

    Returns:
        The graph.

    """
    graph = graphviz.Digraph("test")
    graph.attr(rankdir="LR")

    ids: dict[str, str] = {}

    def node_id(name: str) -> str:
        if name not in ids:
            ids[name] = f"n{len(ids)}"
            graph.node(ids[name], graphviz.escape(name))
        return ids[name]

    for line in lines:
        if any(marker in line for marker in _LOG_MARKERS):
            continue
        fields = line.split()
        if len(fields) < 2:
            continue
        graph.edge(node_id(fields[0]), node_id(fields[1]))
    return graph


def digraph_to_dot(lines: Iterable[str]) -> str:
    """Translate digraph edge lines into DOT source."""
    return build_graph(lines).source


def find_dot_binary() -> str:
    """Return the path of the Graphviz dot binary.

    Raises:
        BinaryNotFoundError: If dot is not on PATH.

    """
    dot = shutil.which("dot")
    if dot is None:
        raise BinaryNotFoundError("dot binary not found. Please install Graphviz and ensure it's in your PATH.")
    return dot


def render(dot_source: str, args: Sequence[str] | None = None) -> bytes:
    """Render DOT source with the dot binary.

    Args:
        dot_source: The DOT graph.
        args: Arguments forwarded to dot, defaults to PNG output.

    Returns:
        The rendered output.

    Raises:
        BinaryNotFoundError: If dot is not on PATH.
        RenderError: If dot exits with a non-zero status.

    """
    cmd = [find_dot_binary(), *(args or DEFAULT_DOT_ARGS)]
    ic(cmd)
    result = subprocess.run(cmd, input=dot_source.encode("utf-8"), capture_output=True, check=False)
    if result.returncode != 0:
        details = result.stderr.decode("utf-8", errors="replace").strip()
        raise RenderError(f"dot failed (exit code {result.returncode}): {details}")
    return result.stdout
