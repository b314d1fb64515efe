"""
Diagram graph model and the canvas JSON parser that produces it.
"""

from infragraph.diagram.graph import (
    Edge,
    Node,
    NormalizedGraph,
    Output,
    Policy,
    Variable,
)
from infragraph.diagram.parser import (
    normalize_to_graph,
    parse_and_normalize,
    parse_diagram,
)

__all__ = [
    "Edge",
    "Node",
    "NormalizedGraph",
    "Output",
    "Policy",
    "Variable",
    "normalize_to_graph",
    "parse_and_normalize",
    "parse_diagram",
]
