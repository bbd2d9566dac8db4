# rubik_engine/core/lattice.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Literal, Sequence, Tuple

import numpy as np

Axis = Literal["x", "y", "z"]
Direction = Literal[1, -1]
Vec3i = Tuple[int, int, int]

AXIS_LABELS: Tuple[Axis, ...] = ("x", "y", "z")
AXIS_DIRECTIONS: Tuple[Direction, ...] = (1, -1)
AXIS_INDEX: Dict[str, int] = {"x": 0, "y": 1, "z": 2}

HALF_PI: float = math.pi / 2.0


@dataclass(frozen=True)
class DirectedAxis:
    """Eje principal con signo: nombra una de las 6 caras vistas en el mundo.

    Attributes:
        axis: Eje ('x', 'y' o 'z').
        direction: +1 o -1.
    """

    axis: Axis
    direction: int

    def vector(self) -> Vec3i:
        """Vector unitario (entero) del eje dirigido."""
        v = [0, 0, 0]
        v[AXIS_INDEX[self.axis]] = self.direction
        return (v[0], v[1], v[2])

    def negate(self) -> "DirectedAxis":
        return DirectedAxis(self.axis, -self.direction)

    def key(self) -> str:
        """Clave estable, por ejemplo "x1" o "y-1"."""
        return f"{self.axis}{self.direction}"


# Orden fijo de enumeración (x+, x-, y+, y-, z+, z-); decide los empates.
DIRECTED_AXES: Tuple[DirectedAxis, ...] = tuple(
    DirectedAxis(a, d) for a in AXIS_LABELS for d in AXIS_DIRECTIONS
)


def rotation_matrix(axis: str, theta: float) -> np.ndarray:
    """Matriz 3x3 que rota un vector `theta` radianes alrededor de un eje principal.

    Usa la regla de la mano derecha (ángulo positivo = antihorario visto
    desde la punta del eje).

    Args:
        axis: Eje de rotación ('x', 'y' o 'z').
        theta: Ángulo en radianes.

    Returns:
        Matriz numpy de 3x3.

    Raises:
        ValueError: Si el eje no es válido.
    """
    c = math.cos(theta)
    s = math.sin(theta)

    if axis == "x":
        return np.array(
            [
                [1.0, 0.0, 0.0],
                [0.0, c, -s],
                [0.0, s, c],
            ]
        )
    if axis == "y":
        return np.array(
            [
                [c, 0.0, s],
                [0.0, 1.0, 0.0],
                [-s, 0.0, c],
            ]
        )
    if axis == "z":
        return np.array(
            [
                [c, -s, 0.0],
                [s, c, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )
    raise ValueError(f"Eje inválido: {axis}")


def round_to_lattice(vector: Sequence[float]) -> Vec3i:
    """Redondea cada componente al entero más cercano (sin -0).

    Args:
        vector: Vector (x, y, z) con posible deriva de punto flotante.

    Returns:
        Tupla de enteros.
    """
    # int() no conserva el signo de -0.0
    x, y, z = (int(round(float(c))) for c in vector)
    return (x, y, z)


def vector_key(vector: Sequence[float]) -> str:
    """Clave de texto basada en coordenadas, por ejemplo (1, -1, 0) -> "1-10"."""
    x, y, z = round_to_lattice(vector)
    return f"{x}{y}{z}"


def is_lattice_point(vector: Sequence[float]) -> bool:
    """Indica si el vector es uno de los 26 puntos válidos de la red."""
    if len(vector) != 3:
        return False
    if any(c not in (-1, 0, 1) for c in vector):
        return False
    return any(c != 0 for c in vector)


def is_facing_vector(vector: Sequence[float]) -> bool:
    """Indica si el vector es unitario y alineado con un eje principal."""
    return sorted(abs(c) for c in vector) == [0, 0, 1]


def directed_axis_of(vector: Sequence[float]) -> DirectedAxis:
    """Eje dirigido dominante de un vector (la componente de mayor magnitud).

    Sirve para convertir la normal de un impacto (no necesariamente exacta)
    en un vector de orientación. En empate gana el primer eje (x, y, z).
    """
    best = 0
    for i in range(1, 3):
        if abs(vector[i]) > abs(vector[best]):
            best = i
    direction = 1 if vector[best] >= 0 else -1
    return DirectedAxis(AXIS_LABELS[best], direction)


def as_vector(v: Sequence[float]) -> np.ndarray:
    return np.array([float(v[0]), float(v[1]), float(v[2])])


class LatticeInvariantError(RuntimeError):
    """Error de programación: una pieza quedó fuera de la red tras un giro."""
