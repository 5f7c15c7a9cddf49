"""Turn natural-language commands into UI actions on any element-tree interface."""

from .action_parser import ActionGroup, Click, Type, extract_fenced_lines, parse_action_lines
from .executor import Executor, ExecutorOpts
from .interface import Interface, Model, TripRecorder
from .reconstitute import MAX_ITERATIONS, NodePayload, TreeRecord, reconstitute_tree
from .stability import StabilityMonitor
from .tree import VIRTUAL_ID_FACTOR, Node, Tree

__all__ = [
    "ActionGroup",
    "Click",
    "Executor",
    "ExecutorOpts",
    "Interface",
    "MAX_ITERATIONS",
    "Model",
    "Node",
    "NodePayload",
    "StabilityMonitor",
    "Tree",
    "TreeRecord",
    "TripRecorder",
    "Type",
    "VIRTUAL_ID_FACTOR",
    "extract_fenced_lines",
    "parse_action_lines",
    "reconstitute_tree",
]
