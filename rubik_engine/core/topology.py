# rubik_engine/core/topology.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from rubik_engine.core.lattice import (
    AXIS_LABELS,
    DirectedAxis,
    Vec3i,
    directed_axis_of,
    vector_key,
)

Color = str  # Letras: "W", "Y", "R", "O", "B", "G"

# Los stickers se dibujan en el centro del cubie desplazados media arista
# (más un epsilon para no quedar en el mismo plano que el plástico).
HALF_CUBIE_LENGTH: float = 0.5
STICKER_EPSILON: float = 0.01


@dataclass(frozen=True)
class StickerLocation:
    """Ubicación discreta de un sticker: posición del cubie + vector de orientación.

    Dos stickers son iguales si sus coordenadas son iguales; la identidad del
    objeto no importa porque las ubicaciones se reemplazan tras cada giro.
    """

    cubie_position: Vec3i
    facing_vector: Vec3i

    def key(self) -> str:
        return vector_key(self.cubie_position) + vector_key(self.facing_vector)

    def facing_axis(self) -> DirectedAxis:
        return directed_axis_of(self.facing_vector)


def _build_cubie_positions() -> Tuple[Vec3i, ...]:
    out: List[Vec3i] = []
    for x in range(-1, 2):
        for y in range(-1, 2):
            for z in range(-1, 2):
                if x != 0 or y != 0 or z != 0:
                    out.append((x, y, z))
    return tuple(out)


def sticker_locations_for(position: Vec3i) -> Tuple[StickerLocation, ...]:
    """Un sticker por cada coordenada no nula del cubie.

    Esquinas: 3 stickers, aristas: 2, centros de cara: 1.
    """
    out: List[StickerLocation] = []
    for i in range(3):
        if position[i] == 0:
            continue
        facing = [0, 0, 0]
        facing[i] = 1 if position[i] > 0 else -1
        out.append(StickerLocation(position, (facing[0], facing[1], facing[2])))
    return tuple(out)


CUBIE_POSITIONS: Tuple[Vec3i, ...] = _build_cubie_positions()
STICKER_LOCATIONS: Tuple[StickerLocation, ...] = tuple(
    loc for pos in CUBIE_POSITIONS for loc in sticker_locations_for(pos)
)

CUBIE_POSITION_KEYS: Tuple[str, ...] = tuple(vector_key(p) for p in CUBIE_POSITIONS)
STICKER_LOCATION_KEYS: Tuple[str, ...] = tuple(loc.key() for loc in STICKER_LOCATIONS)

# Colores por cara (x, y, z) según el sentido del vector de orientación
FACE_COLORS: Dict[str, Tuple[Color, Color]] = {
    "x": ("B", "G"),
    "y": ("W", "Y"),
    "z": ("R", "O"),
}

COLOR_RGB: Dict[Color, Tuple[float, float, float]] = {
    "W": (1.0, 1.0, 1.0),
    "Y": (1.0, 1.0, 0.0),
    "O": (1.0, 0.5, 0.0),
    "R": (1.0, 0.0, 0.0),
    "G": (0.0, 0.85, 0.0),
    "B": (0.0, 0.35, 1.0),
}


def color_for_facing(facing_vector: Vec3i) -> Color:
    """Color inicial (cubo resuelto) de un sticker según hacia dónde mira.

    Args:
        facing_vector: Vector unitario alineado a un eje.

    Returns:
        Letra de color.
    """
    for axis, i in zip(AXIS_LABELS, range(3)):
        if facing_vector[i] != 0:
            pos, neg = FACE_COLORS[axis]
            return pos if facing_vector[i] > 0 else neg
    raise ValueError(f"Vector de orientación inválido: {facing_vector}")


def sticker_center(position, facing) -> Tuple[float, float, float]:
    """Centro 3D de un sticker (acepta vectores continuos durante un giro)."""
    d = HALF_CUBIE_LENGTH + STICKER_EPSILON
    return (
        float(position[0]) + float(facing[0]) * d,
        float(position[1]) + float(facing[1]) * d,
        float(position[2]) + float(facing[2]) * d,
    )


def solved_colors() -> Dict[StickerLocation, Color]:
    """Mapa ubicación -> color del cubo resuelto."""
    return {loc: color_for_facing(loc.facing_vector) for loc in STICKER_LOCATIONS}
