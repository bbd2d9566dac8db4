# rubik_engine/logic/animator.py
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from rubik_engine.core.lattice import (
    HALF_PI,
    LatticeInvariantError,
    Vec3i,
    as_vector,
    is_facing_vector,
    is_lattice_point,
    round_to_lattice,
    vector_key,
)
from rubik_engine.core.move import Move, exact_rotation, partial_rotation
from rubik_engine.core.topology import (
    CUBIE_POSITIONS,
    STICKER_LOCATIONS,
    Color,
    StickerLocation,
    color_for_facing,
)
from rubik_engine.logic.dispatcher import MoveStore

logger = logging.getLogger(__name__)


class CubiePiece:
    """Estado de un cubie: posición discreta fija + transformación continua.

    `position` solo cambia cuando termina un giro; `real_position` guarda la
    posición en tiempo real durante la animación.
    """

    def __init__(self, position: Vec3i) -> None:
        self.position: Vec3i = position
        self.real_position: np.ndarray = as_vector(position)
        self.turn_progress: float = 0.0
        self.offset_axis: Optional[str] = None
        self.offset_theta: float = 0.0

    def key(self) -> str:
        return vector_key(self.position)

    def settle(self) -> None:
        """Vuelve la transformación continua a la posición discreta."""
        self.real_position = as_vector(self.position)
        self.turn_progress = 0.0
        self.offset_axis = None
        self.offset_theta = 0.0

    def __repr__(self) -> str:
        return f"CubiePiece({self.position})"


class StickerPiece:
    """Estado de un sticker: ubicación discreta fija + posición/orientación continuas."""

    def __init__(self, location: StickerLocation, color: Color) -> None:
        self.location: StickerLocation = location
        self.color: Color = color
        self.real_position: np.ndarray = as_vector(location.cubie_position)
        self.real_facing: np.ndarray = as_vector(location.facing_vector)
        self.turn_progress: float = 0.0
        self.offset_axis: Optional[str] = None
        self.offset_theta: float = 0.0

    def key(self) -> str:
        return self.location.key()

    def settle(self) -> None:
        self.real_position = as_vector(self.location.cubie_position)
        self.real_facing = as_vector(self.location.facing_vector)
        self.turn_progress = 0.0
        self.offset_axis = None
        self.offset_theta = 0.0

    def __repr__(self) -> str:
        return f"StickerPiece({self.location.cubie_position}, {self.location.facing_vector}, {self.color!r})"


Piece = Union[CubiePiece, StickerPiece]


class TurnAnimator:
    """Avanza, frame a frame, el giro en curso de cada pieza y la ajusta a la red.

    Estados por pieza:
        - Quieta: sin giro asignado en el `MoveStore`.
        - Girando: con giro asignado y progreso menor al objetivo.
        - Al completar: se recalcula la ubicación discreta con la rotación
          exacta aplicada a la ubicación *anterior* (no a la continua), se
          redondea y se limpia el registro en el `MoveStore`.
    """

    def __init__(self, store: MoveStore, animation_speed: float) -> None:
        self.store: MoveStore = store
        self.animation_speed: float = animation_speed
        self.cubies: List[CubiePiece] = []
        self.stickers: List[StickerPiece] = []
        self.reset()

    def reset(self, colors: Optional[Dict[StickerLocation, Color]] = None) -> None:
        """Reconstruye todas las piezas en reposo.

        Args:
            colors: Colores por ubicación; si es None, cubo resuelto.
        """
        self.cubies = [CubiePiece(p) for p in CUBIE_POSITIONS]
        self.stickers = [
            StickerPiece(loc, color_for_facing(loc.facing_vector) if colors is None else colors[loc])
            for loc in STICKER_LOCATIONS
        ]

    # --------------------------
    # Consultas
    # --------------------------
    def cubie_positions(self) -> List[Vec3i]:
        return [c.position for c in self.cubies]

    def sticker_locations(self) -> List[StickerLocation]:
        return [s.location for s in self.stickers]

    def rest_colors(self) -> Dict[StickerLocation, Color]:
        """Mapa ubicación discreta -> color (estado en reposo)."""
        return {s.location: s.color for s in self.stickers}

    # --------------------------
    # Frame
    # --------------------------
    def tick(self, delta: float) -> List[Piece]:
        """Avanza un frame de `delta` segundos.

        Returns:
            Piezas cuya transformación cambió en este frame.
        """
        if delta <= 0:
            return []

        # Se leen todos los giros antes de mover nada: las claves cambian al ajustar
        pending: List[Tuple[Piece, Move]] = []
        for cubie in self.cubies:
            move = self.store.cubie_moves.get(cubie.key())
            if move is not None:
                pending.append((cubie, move))
        for sticker in self.stickers:
            move = self.store.sticker_moves.get(sticker.key())
            if move is not None:
                pending.append((sticker, move))

        for piece, move in pending:
            self.advance(piece, move, delta)
        return [piece for piece, _ in pending]

    def advance(self, piece: Piece, move: Move, delta: float) -> bool:
        """Aplica la rotación parcial de un frame a una pieza.

        Returns:
            True si el giro de la pieza se completó en este frame.
        """
        delta_theta = move.sign * delta * self.animation_speed
        r = partial_rotation(move, delta_theta)

        piece.real_position = r @ piece.real_position
        if isinstance(piece, StickerPiece):
            piece.real_facing = r @ piece.real_facing

        piece.offset_axis = move.axis
        piece.offset_theta += delta_theta
        piece.turn_progress += delta_theta

        if abs(piece.turn_progress) >= abs(move.target_theta):
            self.snap(piece, move)
            return True
        return False

    def snap(self, piece: Piece, move: Move) -> None:
        """Completa el giro: ubicación exacta desde la ubicación previa y redondeo."""
        if not math.isclose(abs(move.target_theta), HALF_PI):
            logger.error("Giro completado con ángulo no soportado: %s", move)
            raise LatticeInvariantError(f"Ángulo objetivo inválido: {move.target_theta}")

        m = exact_rotation(move)
        old_key = piece.key()

        if isinstance(piece, CubiePiece):
            position = round_to_lattice(m @ as_vector(piece.position))
            self._check_location(piece, position, None)
            piece.position = position
            piece.settle()
            self.store.clear_cubie_move(old_key)
        else:
            position = round_to_lattice(m @ as_vector(piece.location.cubie_position))
            facing = round_to_lattice(m @ as_vector(piece.location.facing_vector))
            self._check_location(piece, position, facing)
            piece.location = StickerLocation(position, facing)
            piece.settle()
            self.store.clear_sticker_move(old_key)

    @staticmethod
    def _check_location(piece: Piece, position: Vec3i, facing: Optional[Vec3i]) -> None:
        if not is_lattice_point(position):
            logger.error("%r quedó fuera de la red: %s", piece, position)
            raise LatticeInvariantError(f"Posición fuera de la red: {position}")
        if facing is None:
            return
        if not is_facing_vector(facing):
            logger.error("%r quedó con orientación inválida: %s", piece, facing)
            raise LatticeInvariantError(f"Orientación inválida: {facing}")
        i = next(i for i in range(3) if facing[i] != 0)
        if position[i] != facing[i]:
            logger.error("%r mira hacia dentro del cubo: %s %s", piece, position, facing)
            raise LatticeInvariantError(f"Sticker fuera de una cara: {position} {facing}")
