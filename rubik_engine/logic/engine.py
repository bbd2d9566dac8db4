# rubik_engine/logic/engine.py
from __future__ import annotations

import logging
from typing import List, Optional

from rubik_engine.core.config import EngineConfig
from rubik_engine.core.cube_model import CubeModel
from rubik_engine.core.move import Move
from rubik_engine.core.topology import StickerLocation
from rubik_engine.logic.animator import CubiePiece, Piece, StickerPiece, TurnAnimator
from rubik_engine.logic.camera import CameraState, Ray, resolve_camera_axes
from rubik_engine.logic.dispatcher import MoveStore
from rubik_engine.logic.input import PointerGesture, Vec2f, key_to_move
from rubik_engine.logic.moves import sequence_to_moves

logger = logging.getLogger(__name__)


class CubeEngine:
    """Punto de entrada del motor de giros para el host (render + input).

    Coordina:
    - La cola de giros y los giros activos (`MoveStore`)
    - La animación por frame (`TurnAnimator`)
    - El gesto de arrastre en curso (`PointerGesture`)

    Todo ocurre en un solo hilo: el host llama a los métodos de input cuando
    llegan eventos y a `tick` una vez por frame.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config: EngineConfig = config or EngineConfig()
        self.store: MoveStore = MoveStore()
        self.animator: TurnAnimator = TurnAnimator(self.store, self.config.animation_speed)
        self.gesture: PointerGesture = PointerGesture(self.config)
        self.visible: bool = True

    # --------------------------
    # Giros
    # --------------------------
    def queue_move(self, move: Move) -> None:
        """Encola un giro; si hay uno en curso, espera su turno (FIFO)."""
        self.store.queue_move(move)

    def queue_sequence(self, text: str) -> List[Move]:
        """Encola una secuencia en notación (interpretada con F = +Z, U = +Y).

        Raises:
            ValueError: Si algún token es inválido (no se encola nada).
        """
        moves = sequence_to_moves(text)
        for move in moves:
            self.queue_move(move)
        return moves

    # --------------------------
    # Input
    # --------------------------
    def handle_key(self, key: str, camera: CameraState) -> Optional[Move]:
        """Traduce una tecla con la orientación actual de la cámara y la encola."""
        move = key_to_move(key, resolve_camera_axes(camera))
        if move is not None:
            self.queue_move(move)
        return move

    def pointer_down(self, screen: Vec2f, location: Optional[StickerLocation], ray: Ray) -> bool:
        return self.gesture.pointer_down(screen, location, ray)

    def pointer_move(self, screen: Vec2f, ray: Ray) -> Optional[Move]:
        move = self.gesture.pointer_move(screen, ray)
        if move is not None:
            self.queue_move(move)
        return move

    def pointer_up(self) -> None:
        self.gesture.pointer_up()

    # --------------------------
    # Frame
    # --------------------------
    def set_visible(self, visible: bool) -> None:
        """Con la ventana oculta los frames no avanzan la animación."""
        self.visible = visible

    def tick(self, delta: float) -> List[Piece]:
        """Avanza un frame: despacha el siguiente giro si todo está quieto y anima.

        Args:
            delta: Segundos desde el frame anterior.

        Returns:
            Piezas que cambiaron en este frame.
        """
        if not self.visible:
            return []
        self.store.dispatch_if_idle(self.animator.cubie_positions(), self.animator.sticker_locations())
        return self.animator.tick(delta)

    def is_idle(self) -> bool:
        return not self.store.is_active_move() and not self.store.move_buffer

    # --------------------------
    # Estado
    # --------------------------
    @property
    def cubies(self) -> List[CubiePiece]:
        return self.animator.cubies

    @property
    def stickers(self) -> List[StickerPiece]:
        return self.animator.stickers

    def model(self) -> CubeModel:
        """Modelo discreto con las ubicaciones fijas (último estado en reposo)."""
        return CubeModel.from_locations(self.animator.rest_colors())

    def to_repr(self) -> str:
        return self.model().to_repr()

    def reset(self) -> None:
        """Descarta la cola y los giros en curso y vuelve al cubo resuelto."""
        self.store.clear_all()
        self.animator.reset()
        self.gesture.pointer_up()
        logger.info("Cubo reiniciado")
