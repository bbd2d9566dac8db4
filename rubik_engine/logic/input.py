# rubik_engine/logic/input.py
from __future__ import annotations

import logging
import math
from typing import Dict, Literal, Optional, Sequence, Tuple

from rubik_engine.core.config import EngineConfig
from rubik_engine.core.lattice import (
    AXIS_INDEX,
    AXIS_LABELS,
    DirectedAxis,
    directed_axis_of,
    round_to_lattice,
)
from rubik_engine.core.move import ALL_LAYERS, Move
from rubik_engine.core.topology import StickerLocation
from rubik_engine.logic.camera import CameraAxes, Ray, Vec3f

logger = logging.getLogger(__name__)

LayerKind = Literal["outer", "slice", "whole"]
Vec2f = Tuple[float, float]

# Letra (mayúscula) -> (cara de la cámara, tipo de capa).
# Mayúscula = horario visto desde fuera de esa cara; minúscula = antihorario.
KEY_MAP: Dict[str, Tuple[str, LayerKind]] = {
    "U": ("up", "outer"),
    "D": ("down", "outer"),
    "F": ("front", "outer"),
    "B": ("back", "outer"),
    "R": ("right", "outer"),
    "L": ("left", "outer"),
    # Slices: M como L, E como D, S como F
    "M": ("left", "slice"),
    "E": ("down", "slice"),
    "S": ("front", "slice"),
    # Cubo completo: X como R, Y como U, Z como F
    "X": ("right", "whole"),
    "Y": ("up", "whole"),
    "Z": ("front", "whole"),
}

# Quiralidad del arrastre: PARITY[(eje de rotación, eje clicado)] es el signo
# de la permutación (rotación, clicado, arrastre) de (x, y, z).
PARITY: Dict[Tuple[str, str], int] = {
    ("x", "y"): 1,
    ("y", "z"): 1,
    ("z", "x"): 1,
    ("x", "z"): -1,
    ("y", "x"): -1,
    ("z", "y"): -1,
}


def key_to_move(key: str, camera_axes: CameraAxes) -> Optional[Move]:
    """Traduce una tecla a un giro relativo a la cámara.

    Args:
        key: Tecla presionada (por ejemplo: "R", "u", "x").
        camera_axes: Caras resueltas de la cámara actual.

    Returns:
        El `Move` correspondiente, o None si la tecla no está mapeada.
    """
    if len(key) != 1:
        return None
    entry = KEY_MAP.get(key.upper())
    if entry is None:
        return None

    face_name, kind = entry
    face = camera_axes.by_name(face_name)

    # Horario visto desde fuera de la cara = negativo alrededor de su normal
    visual = 1 if key.isupper() else -1
    direction = -visual * face.direction

    if kind == "outer":
        layers = frozenset((face.direction,))
    elif kind == "slice":
        layers = frozenset((0,))
    else:
        layers = ALL_LAYERS

    return Move.of(face.axis, layers, direction)


def location_from_hit(cubie_position: Sequence[int], normal: Sequence[float]) -> Optional[StickerLocation]:
    """Ubicación del sticker a partir del cubie impactado y la normal de la superficie.

    Returns:
        None si el cubie no tiene sticker en esa dirección (cara interna).
    """
    facing = directed_axis_of(normal)
    pos = round_to_lattice(cubie_position)
    if pos[AXIS_INDEX[facing.axis]] != facing.direction:
        return None
    return StickerLocation(pos, facing.vector())


def intersect_face_plane(ray: Ray, face: DirectedAxis, plane_offset: float) -> Optional[Vec3f]:
    """Intersección del rayo con el plano extendido de una cara.

    El plano es perpendicular a `face` y está a `plane_offset` del origen.

    Returns:
        Punto de intersección, o None si el rayo es paralelo o el plano
        queda detrás del origen del rayo.
    """
    i = AXIS_INDEX[face.axis]
    d = ray.direction[i]
    if abs(d) < 1e-9:
        return None
    t = (face.direction * plane_offset - ray.origin[i]) / d
    if t < 0:
        return None
    return (
        ray.origin[0] + t * ray.direction[0],
        ray.origin[1] + t * ray.direction[1],
        ray.origin[2] + t * ray.direction[2],
    )


def drag_normal(clicked: DirectedAxis, initial_point: Vec3f, current_point: Vec3f) -> Optional[DirectedAxis]:
    """Dirección del arrastre sobre el plano de la cara clicada.

    Es el eje (de los dos que generan el plano) con mayor desplazamiento,
    con el signo de ese desplazamiento.
    """
    best: Optional[DirectedAxis] = None
    largest = 0.0
    for axis in AXIS_LABELS:
        if axis == clicked.axis:
            continue
        i = AXIS_INDEX[axis]
        delta = current_point[i] - initial_point[i]
        if abs(delta) > largest:
            largest = abs(delta)
            best = DirectedAxis(axis, 1 if delta > 0 else -1)
    return best


def drag_to_move(location: StickerLocation, initial_point: Vec3f, current_point: Vec3f) -> Optional[Move]:
    """Convierte un arrastre sobre un sticker en el giro de la capa que lo contiene.

    Args:
        location: Sticker donde empezó el arrastre.
        initial_point: Intersección inicial con el plano de la cara.
        current_point: Intersección actual con el mismo plano.

    Returns:
        El `Move` resultante, o None si no hubo desplazamiento.
    """
    clicked = location.facing_axis()
    drag = drag_normal(clicked, initial_point, current_point)
    if drag is None:
        return None

    rotation_axis = next(a for a in AXIS_LABELS if a not in (clicked.axis, drag.axis))
    layer = location.cubie_position[AXIS_INDEX[rotation_axis]]
    sign = PARITY[(rotation_axis, clicked.axis)] * clicked.direction * drag.direction

    return Move.of(rotation_axis, (layer,), sign)


class PointerGesture:
    """Estado transitorio de un gesto click + arrastre sobre el cubo.

    Ciclo de vida:
        - `pointer_down`: guarda el sticker clicado y la intersección inicial
          con el plano extendido de su cara.
        - `pointer_move`: cuando el arrastre en pantalla supera el umbral,
          intersecta el rayo actual con el mismo plano y decide el giro.
        - `pointer_up`: limpia todo el estado.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        cfg = config or EngineConfig()
        self.drag_threshold: float = float(cfg.drag_threshold)
        self.plane_offset: float = cfg.plane_offset

        self.screen_location: Optional[Vec2f] = None
        self.selection: Optional[StickerLocation] = None
        self.initial_point: Optional[Vec3f] = None

    @property
    def active(self) -> bool:
        return (
            self.screen_location is not None
            and self.selection is not None
            and self.initial_point is not None
        )

    def pointer_down(self, screen: Vec2f, location: Optional[StickerLocation], ray: Ray) -> bool:
        """Inicia el gesto sobre un sticker.

        Args:
            screen: Posición del puntero en pantalla (píxeles).
            location: Sticker impactado, o None si se clicó fuera del cubo.
            ray: Rayo desde la cámara a través del puntero.

        Returns:
            True si el gesto quedó activo.
        """
        self.pointer_up()
        if location is None:
            return False

        point = intersect_face_plane(ray, location.facing_axis(), self.plane_offset)
        if point is None:
            return False

        self.screen_location = (float(screen[0]), float(screen[1]))
        self.selection = location
        self.initial_point = point
        return True

    def pointer_move(self, screen: Vec2f, ray: Ray) -> Optional[Move]:
        """Actualiza el gesto; devuelve un giro cuando el arrastre es suficiente."""
        if not self.active:
            return None

        sx, sy = self.screen_location  # type: ignore[misc]
        if math.hypot(screen[0] - sx, screen[1] - sy) < self.drag_threshold:
            return None

        location = self.selection
        current = intersect_face_plane(ray, location.facing_axis(), self.plane_offset)  # type: ignore[union-attr]
        if current is None:
            return None

        move = drag_to_move(location, self.initial_point, current)  # type: ignore[arg-type]
        if move is not None:
            logger.debug("Arrastre sobre %s -> %s", location.key(), move)  # type: ignore[union-attr]
            # Un gesto produce a lo sumo un giro
            self.pointer_up()
        return move

    def pointer_up(self) -> None:
        self.screen_location = None
        self.selection = None
        self.initial_point = None
