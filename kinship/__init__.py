"""Kinship graph engine: clan membership, generation layout and relationship phrases."""
from .graph import GraphModel, build_graph
from .models import EdgeKind, Gender, Person, Relationship
from .relationship import NO_CONNECTION, SELF_PHRASE, find_relationship
from .topology import TopologyResult, compute_topology

__all__ = [
    "GraphModel",
    "build_graph",
    "EdgeKind",
    "Gender",
    "Person",
    "Relationship",
    "NO_CONNECTION",
    "SELF_PHRASE",
    "find_relationship",
    "TopologyResult",
    "compute_topology",
]
