from rubik_engine.core.config import EngineConfig
from rubik_engine.core.cube_model import CubeModel
from rubik_engine.core.lattice import DirectedAxis, LatticeInvariantError
from rubik_engine.core.move import Move

__all__ = ["CubeModel", "DirectedAxis", "EngineConfig", "LatticeInvariantError", "Move"]
