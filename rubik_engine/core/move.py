# rubik_engine/core/move.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Sequence

import numpy as np

from rubik_engine.core.lattice import AXIS_INDEX, HALF_PI, rotation_matrix

ALL_LAYERS: FrozenSet[int] = frozenset((-1, 0, 1))


@dataclass(frozen=True)
class Move:
    """Giro de un cuarto de vuelta sobre una o más capas de un eje.

    Representación:
        - `axis`: eje de rotación ('x', 'y' o 'z').
        - `layers`: valores de la coordenada `axis` que se giran. Una capa
          exterior selecciona {1} o {-1}, un slice {0} y una rotación del
          cubo completo {-1, 0, 1}.
        - `target_theta`: ángulo objetivo (±pi/2) alrededor del eje positivo,
          regla de la mano derecha.
    """

    axis: str
    layers: FrozenSet[int]
    target_theta: float

    def __post_init__(self) -> None:
        if self.axis not in AXIS_INDEX:
            raise ValueError(f"Eje no soportado: {self.axis}")
        # Acepta cualquier iterable y lo congela
        object.__setattr__(self, "layers", frozenset(self.layers))
        if not self.layers or not self.layers <= ALL_LAYERS:
            raise ValueError(f"Capas inválidas: {sorted(self.layers)}")
        if not math.isclose(abs(self.target_theta), HALF_PI):
            raise ValueError(f"Solo se soportan cuartos de vuelta: {self.target_theta}")

    @classmethod
    def of(cls, axis: str, layers: Iterable[int], direction: int) -> "Move":
        """Atajo: construye el giro con `direction` (+1/-1) cuartos de vuelta."""
        return cls(axis, frozenset(layers), math.copysign(HALF_PI, direction))

    @property
    def sign(self) -> int:
        return 1 if self.target_theta > 0 else -1

    def is_whole_cube(self) -> bool:
        return self.layers == ALL_LAYERS

    def inverse(self) -> "Move":
        return Move(self.axis, self.layers, -self.target_theta)


def targets(move: Move, position: Sequence[float]) -> bool:
    """Indica si el giro afecta al punto de la red `position`."""
    return int(round(position[AXIS_INDEX[move.axis]])) in move.layers


def exact_rotation(move: Move) -> np.ndarray:
    """Matriz de rotación exacta (el cuarto de vuelta completo) del giro."""
    return rotation_matrix(move.axis, move.target_theta)


def partial_rotation(move: Move, delta_theta: float) -> np.ndarray:
    """Matriz de rotación incremental para un frame.

    Args:
        move: Giro en curso.
        delta_theta: Ángulo del frame; debe tener el mismo signo que el objetivo.

    Raises:
        ValueError: Si el giro cambiaría de sentido a mitad de la animación.
    """
    if delta_theta * move.target_theta < 0:
        raise ValueError("Un giro no puede invertir su sentido durante la animación.")
    return rotation_matrix(move.axis, delta_theta)
