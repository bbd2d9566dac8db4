# rubik_engine/core/cube_model.py
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Tuple

from rubik_engine.core.lattice import (
    LatticeInvariantError,
    Vec3i,
    as_vector,
    is_lattice_point,
    round_to_lattice,
)
from rubik_engine.core.move import Move, exact_rotation, targets
from rubik_engine.core.topology import (
    STICKER_LOCATIONS,
    Color,
    StickerLocation,
    solved_colors,
)

logger = logging.getLogger(__name__)

CubeHash = Tuple[Color, ...]

# Orden de caras en la representación de 54 caracteres: U, D, F, B, R, L
REPR_FACE_ORDER: Tuple[Vec3i, ...] = (
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
    (1, 0, 0),
    (-1, 0, 0),
)


def _pos_2d(location: StickerLocation) -> Tuple[int, int]:
    """Coordenadas (x, y) del sticker mirando su cara de frente, con (0, 0) en el centro.

    La y crece hacia abajo, así que fila = y + 1 y columna = x + 1.
    """
    x, y, z = location.cubie_position
    facing = location.facing_vector
    if facing == (0, 1, 0):
        return x, z
    if facing == (0, -1, 0):
        return x, -z
    if facing == (0, 0, 1):
        return x, -y
    if facing == (0, 0, -1):
        return -x, -y
    if facing == (1, 0, 0):
        return -z, -y
    if facing == (-1, 0, 0):
        return z, -y
    raise ValueError(f"Vector de orientación inválido: {facing}")


def repr_index(location: StickerLocation) -> int:
    """Índice (0..53) de la ubicación en la representación de 54 caracteres."""
    face_idx = REPR_FACE_ORDER.index(location.facing_vector)
    col, row = _pos_2d(location)
    return face_idx * 9 + (row + 1) * 3 + (col + 1)


class CubeModel:
    """Modelo discreto del cubo 3x3 en reposo.

    Representación:
        - `colors[ubicación]` es la letra de color del sticker que está en esa
          ubicación (posición del cubie + vector de orientación).

    Rotaciones:
        - Al aplicar un giro se rota posición y orientación de cada sticker
          afectado con la matriz exacta del giro, se redondea a la red y se
          reubica el color resultante.
    """

    def __init__(self) -> None:
        """Inicializa el cubo en estado resuelto."""
        self.colors: Dict[StickerLocation, Color] = solved_colors()

    @classmethod
    def from_locations(cls, colors: Mapping[StickerLocation, Color]) -> "CubeModel":
        """Construye el modelo a partir de un mapa ubicación -> color.

        Raises:
            ValueError: Si el mapa no cubre exactamente las 54 ubicaciones.
        """
        if set(colors) != set(STICKER_LOCATIONS):
            raise ValueError("El mapa de colores debe cubrir las 54 ubicaciones.")
        model = cls()
        model.colors = dict(colors)
        return model

    # --------------------------
    # Public API
    # --------------------------
    def is_solved(self) -> bool:
        """Indica si el cubo está resuelto (cada cara con un solo color)."""
        faces: Dict[Vec3i, set] = {}
        for loc, color in self.colors.items():
            faces.setdefault(loc.facing_vector, set()).add(color)
        return all(len(c) == 1 for c in faces.values())

    def to_hashable(self) -> CubeHash:
        """Estado inmutable y hasheable (equivale a la representación de 54 caracteres)."""
        return tuple(self.to_repr())

    def to_repr(self) -> str:
        """Aplana el cubo a 54 caracteres.

        Caras en orden arriba/abajo/frente/atrás/derecha/izquierda; cada cara
        se lee de izquierda a derecha y de arriba a abajo.
        """
        out: List[Color] = ["X"] * 54
        for loc, color in self.colors.items():
            out[repr_index(loc)] = color
        return "".join(out)

    def color_counts(self) -> Dict[Color, int]:
        return dict(Counter(self.colors.values()))

    def apply_moves(self, moves: Iterable[Move]) -> None:
        for move in moves:
            self.apply_move(move)

    def apply_sequence(self, text: str) -> List[Move]:
        """Aplica una secuencia en notación (F = +Z, U = +Y).

        Raises:
            ValueError: Si algún token es inválido; en ese caso no se aplica nada.
        """
        from rubik_engine.logic.moves import sequence_to_moves

        moves = sequence_to_moves(text)
        self.apply_moves(moves)
        return moves

    def apply_token(self, token: str) -> List[Move]:
        from rubik_engine.logic.moves import token_to_moves

        moves = token_to_moves(token)
        self.apply_moves(moves)
        return moves

    def apply_move(self, move: Move) -> None:
        """Aplica un giro completo de forma instantánea (sin animación).

        Args:
            move: Giro a aplicar.

        Raises:
            LatticeInvariantError: Si algún sticker quedara fuera de la red.
        """
        m = exact_rotation(move)
        new: Dict[StickerLocation, Color] = {}

        for loc, color in self.colors.items():
            if not targets(move, loc.cubie_position):
                new[loc] = color
                continue

            pos2 = round_to_lattice(m @ as_vector(loc.cubie_position))
            n2 = round_to_lattice(m @ as_vector(loc.facing_vector))
            if not is_lattice_point(pos2):
                logger.error("Giro %s sacó %s de la red", move, loc)
                raise LatticeInvariantError(f"Posición fuera de la red: {pos2}")
            new[StickerLocation(pos2, n2)] = color

        if len(new) != len(self.colors):
            logger.error("Giro %s superpuso stickers", move)
            raise LatticeInvariantError("Dos stickers terminaron en la misma ubicación.")

        self.colors = new

    def reset(self) -> None:
        """Reinicia el cubo a estado resuelto."""
        self.colors = solved_colors()
