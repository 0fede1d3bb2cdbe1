"""Worklist collapse algorithm for voxel tile placement."""

from .grid import VoxelGrid, Cell, CellState
from .usage import UsageTracker, UsageEntry
from .boundary import BoundaryPolicy
from .propagator import ConstraintPropagator, CandidateDomain
from .selector import WeightedSelector, Selection, Diagnostic
from .solver import CollapseSolver, SolverState, StepResult, GenerationResult, SpawnCallback

__all__ = [
    "VoxelGrid",
    "Cell",
    "CellState",
    "UsageTracker",
    "UsageEntry",
    "BoundaryPolicy",
    "ConstraintPropagator",
    "CandidateDomain",
    "WeightedSelector",
    "Selection",
    "Diagnostic",
    "CollapseSolver",
    "SolverState",
    "StepResult",
    "GenerationResult",
    "SpawnCallback",
]
