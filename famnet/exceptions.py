"""
famnet exceptions

ValidationError    - broken input tables (dangling edges, duplicate names), fatal
ConvergenceError   - an iterative solver ran out of iterations, per metric
InvalidArgumentError - caller passed something out of domain
"""

from typing import Optional


class FamnetError(Exception):
    """Base exception for everything raised by famnet."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ValidationError(FamnetError):
    """Raised when the node/edge tables do not form a valid family graph."""

    pass


class ConvergenceError(FamnetError):
    """Raised when eigenvector centrality, PageRank or HITS fails to converge."""

    pass


class InvalidArgumentError(FamnetError):
    """Raised when a parameter is outside its domain."""

    pass
