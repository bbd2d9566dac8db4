# rubik_engine/logic/dispatcher.py
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional

from rubik_engine.core.lattice import Vec3i, vector_key
from rubik_engine.core.move import Move, targets
from rubik_engine.core.topology import CUBIE_POSITION_KEYS, STICKER_LOCATION_KEYS, StickerLocation

logger = logging.getLogger(__name__)

MoveMap = Dict[str, Optional[Move]]


class MoveStore:
    """Cola de giros pendientes y giro activo de cada cubie/sticker.

    Representación:
        - `move_buffer`: cola FIFO de giros aún no ejecutados.
        - `cubie_moves[clave de posición]`: giro en curso del cubie que está
          en esa posición (None si está quieto).
        - `sticker_moves[clave de ubicación]`: idem para cada sticker.

    Las claves son la posición *actual* de la pieza: cambian tras cada giro
    completado, así que hay que volver a calcularlas después de cada ajuste.
    """

    def __init__(self) -> None:
        self.move_buffer: Deque[Move] = deque()
        self.cubie_moves: MoveMap = {k: None for k in CUBIE_POSITION_KEYS}
        self.sticker_moves: MoveMap = {k: None for k in STICKER_LOCATION_KEYS}

    # --------------------------
    # Cola
    # --------------------------
    def queue_move(self, move: Move) -> None:
        """Agrega un giro al final de la cola (no lo ejecuta)."""
        self.move_buffer.append(move)
        logger.debug("Encolado %s (pendientes: %d)", move, len(self.move_buffer))

    def dequeue_move(self) -> Optional[Move]:
        if not self.move_buffer:
            return None
        return self.move_buffer.popleft()

    def clear_moves(self) -> None:
        self.move_buffer.clear()

    def next_move(self) -> Optional[Move]:
        return self.move_buffer[0] if self.move_buffer else None

    # --------------------------
    # Giros activos
    # --------------------------
    def execute_move(
        self,
        move: Move,
        cubie_positions: Iterable[Vec3i],
        sticker_locations: Iterable[StickerLocation],
    ) -> List[str]:
        """Asigna el giro a cada cubie y sticker afectado.

        Args:
            move: Giro a ejecutar.
            cubie_positions: Posiciones actuales de los cubies.
            sticker_locations: Ubicaciones actuales de los stickers.

        Returns:
            Claves de cubies que recibieron el giro.
        """
        assigned: List[str] = []
        for position in cubie_positions:
            if targets(move, position):
                key = vector_key(position)
                self.cubie_moves[key] = move
                assigned.append(key)

        for location in sticker_locations:
            if targets(move, location.cubie_position):
                self.sticker_moves[location.key()] = move
        return assigned

    def clear_cubie_move(self, position_key: str) -> None:
        self.cubie_moves[position_key] = None

    def clear_sticker_move(self, location_key: str) -> None:
        self.sticker_moves[location_key] = None

    def clear_all(self) -> None:
        """Vacía la cola y todos los giros activos."""
        self.clear_moves()
        for k in self.cubie_moves:
            self.cubie_moves[k] = None
        for k in self.sticker_moves:
            self.sticker_moves[k] = None

    def is_active_move(self) -> bool:
        """True si alguna pieza tiene un giro en curso."""
        return any(m is not None for m in self.cubie_moves.values()) or any(
            m is not None for m in self.sticker_moves.values()
        )

    def dispatch_if_idle(
        self,
        cubie_positions: Iterable[Vec3i],
        sticker_locations: Iterable[StickerLocation],
    ) -> Optional[Move]:
        """Si nada está girando, saca el siguiente giro de la cola y lo ejecuta.

        Garantiza que en todo el cubo haya a lo sumo un giro en curso.

        Returns:
            El giro despachado, o None.
        """
        if self.is_active_move() or not self.move_buffer:
            return None

        move = self.move_buffer.popleft()
        assigned = self.execute_move(move, cubie_positions, sticker_locations)
        logger.debug("Despachado %s a %d cubies", move, len(assigned))
        return move
