# rubik_engine/core/config.py
from __future__ import annotations

from dataclasses import dataclass

from rubik_engine.core.topology import HALF_CUBIE_LENGTH, STICKER_EPSILON

MIN_DRAG_THRESHOLD: int = 50
MAX_DRAG_THRESHOLD: int = 75


@dataclass(frozen=True)
class EngineConfig:
    """Parámetros del motor de giros.

    Attributes:
        animation_speed: Velocidad de giro en radianes por segundo.
        drag_threshold: Distancia mínima (píxeles) de arrastre antes de decidir un giro.
        plane_offset: Distancia del origen a los planos extendidos de cada cara.
        frame_interval_ms: Intervalo del timer de animación del host (~60fps).
    """

    animation_speed: float = 10.0
    drag_threshold: int = MAX_DRAG_THRESHOLD
    plane_offset: float = 1.0 + HALF_CUBIE_LENGTH + STICKER_EPSILON
    frame_interval_ms: int = 16

    def __post_init__(self) -> None:
        if self.animation_speed <= 0:
            raise ValueError("animation_speed debe ser mayor que 0.")
        if not MIN_DRAG_THRESHOLD <= self.drag_threshold <= MAX_DRAG_THRESHOLD:
            raise ValueError(
                f"drag_threshold debe estar entre {MIN_DRAG_THRESHOLD} y {MAX_DRAG_THRESHOLD}."
            )
        if self.plane_offset <= 1.0:
            raise ValueError("plane_offset debe quedar fuera del cubo (> 1).")
        if self.frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms debe ser mayor que 0.")
