from famnet.exceptions import ConvergenceError, FamnetError, InvalidArgumentError, ValidationError
from famnet.graph_store import FamilyGraph, adjacency, build, to_undirected

__version__ = '0.1.0'
