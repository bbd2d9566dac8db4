# rubik_engine/logic/camera.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from rubik_engine.core.lattice import (
    DIRECTED_AXES,
    HALF_PI,
    DirectedAxis,
    as_vector,
    directed_axis_of,
    rotation_matrix,
    round_to_lattice,
)

Vec3f = Tuple[float, float, float]

# Límites de la órbita: la cámara nunca queda exactamente sobre el eje vertical
MIN_POLAR: float = 0.01
MAX_POLAR: float = math.pi - 0.01


def clamp_polar(polar: float) -> float:
    return max(MIN_POLAR, min(MAX_POLAR, polar))


# Si la cámara mira la cara de arriba o de abajo, su cara "up" no se deduce de
# la posición: se elige por la rotación en Z (roll) más cercana a uno de estos
# ángulos. Alrededor del círculo hay un salto de +pi a -pi, así que ambos
# extremos apuntan al mismo eje.
#
#       PI & -PI
#         ---
#       /     \
# PI/2 |       | -PI/2
#       \     /
#         ---
#          0
UP_AXIS_ROTATION_MAP: Dict[int, Tuple[Tuple[float, DirectedAxis], ...]] = {
    1: (
        (math.pi, DirectedAxis("z", 1)),
        (-math.pi, DirectedAxis("z", 1)),
        (-HALF_PI, DirectedAxis("x", 1)),
        (0.0, DirectedAxis("z", -1)),
        (HALF_PI, DirectedAxis("x", -1)),
    ),
    -1: (
        (math.pi, DirectedAxis("z", -1)),
        (-math.pi, DirectedAxis("z", -1)),
        (-HALF_PI, DirectedAxis("x", 1)),
        (0.0, DirectedAxis("z", 1)),
        (HALF_PI, DirectedAxis("x", -1)),
    ),
}


@dataclass(frozen=True)
class Ray:
    """Rayo en coordenadas del mundo (origen + dirección normalizada)."""

    origin: Vec3f
    direction: Vec3f


@dataclass(frozen=True)
class CameraState:
    """Foto de la cámara en un instante: posición y orientación.

    La orientación es un Euler de orden XYZ (como three.js), así que
    `rotation[2]` es el roll de la cámara.

    Attributes:
        position: Posición (x, y, z) de la cámara.
        rotation: Ángulos Euler (x, y, z) en radianes.
        fov: Campo de visión vertical en grados.
        aspect: Relación ancho/alto del viewport.
    """

    position: Vec3f
    rotation: Vec3f = (0.0, 0.0, 0.0)
    fov: float = 45.0
    aspect: float = 1.0

    @classmethod
    def look_at(
        cls,
        position: Vec3f,
        target: Vec3f = (0.0, 0.0, 0.0),
        up: Vec3f = (0.0, 1.0, 0.0),
        fov: float = 45.0,
        aspect: float = 1.0,
    ) -> "CameraState":
        """Construye la cámara apuntando a `target`, como lo haría un control orbital.

        Args:
            position: Posición de la cámara.
            target: Punto al que mira.
            up: Vector "arriba" del mundo.
            fov: Campo de visión vertical (grados).
            aspect: Relación de aspecto.

        Returns:
            Nueva `CameraState` con el Euler XYZ correspondiente.
        """
        eye = as_vector(position)
        up_v = as_vector(up)

        z = eye - as_vector(target)
        if float(np.dot(z, z)) == 0.0:
            z[2] = 1.0
        z = z / np.linalg.norm(z)

        x = np.cross(up_v, z)
        if float(np.dot(x, x)) == 0.0:
            # up y z paralelos: se empuja z un poco, igual que three.js
            if abs(up_v[2]) == 1.0:
                z[0] += 0.0001
            else:
                z[2] += 0.0001
            z = z / np.linalg.norm(z)
            x = np.cross(up_v, z)
        x = x / np.linalg.norm(x)
        y = np.cross(z, x)

        basis = np.column_stack((x, y, z))
        return cls(
            position=(float(eye[0]), float(eye[1]), float(eye[2])),
            rotation=_euler_xyz_from_matrix(basis),
            fov=fov,
            aspect=aspect,
        )

    @classmethod
    def orbit(
        cls,
        radius: float,
        azimuth: float,
        polar: float,
        fov: float = 45.0,
        aspect: float = 1.0,
    ) -> "CameraState":
        """Ubica la cámara en coordenadas esféricas alrededor del origen.

        Args:
            radius: Distancia al origen.
            azimuth: Ángulo alrededor del eje Y (0 = sobre +Z).
            polar: Ángulo desde +Y, acotado a [MIN_POLAR, MAX_POLAR].
        """
        polar = clamp_polar(polar)
        s = math.sin(polar)
        position = (
            radius * s * math.sin(azimuth),
            radius * math.cos(polar),
            radius * s * math.cos(azimuth),
        )
        return cls.look_at(position, fov=fov, aspect=aspect)

    def basis(self) -> np.ndarray:
        """Matriz de rotación de la cámara (columnas: derecha, arriba, atrás)."""
        rx, ry, rz = self.rotation
        return rotation_matrix("x", rx) @ rotation_matrix("y", ry) @ rotation_matrix("z", rz)

    def ray_from_screen(self, x: float, y: float, width: float, height: float) -> Ray:
        """Rayo desde la cámara a través del píxel (x, y) del viewport.

        Args:
            x: Coordenada X en píxeles (origen arriba a la izquierda).
            y: Coordenada Y en píxeles.
            width: Ancho del viewport.
            height: Alto del viewport.
        """
        ndc_x = (x / width) * 2.0 - 1.0
        ndc_y = -(y / height) * 2.0 + 1.0

        t = math.tan(math.radians(self.fov) / 2.0)
        local = np.array([ndc_x * t * self.aspect, ndc_y * t, -1.0])
        d = self.basis() @ local
        d = d / np.linalg.norm(d)
        return Ray(self.position, (float(d[0]), float(d[1]), float(d[2])))


def _euler_xyz_from_matrix(m: np.ndarray) -> Vec3f:
    m13 = max(-1.0, min(1.0, float(m[0, 2])))
    ry = math.asin(m13)
    if abs(m13) < 0.9999999:
        rx = math.atan2(-m[1, 2], m[2, 2])
        rz = math.atan2(-m[0, 1], m[0, 0])
    else:
        rx = math.atan2(m[2, 1], m[1, 1])
        rz = 0.0
    return (float(rx), float(ry), float(rz))


@dataclass(frozen=True)
class CameraAxes:
    """Qué eje dirigido ve la cámara como cada una de sus 6 caras."""

    front: DirectedAxis
    back: DirectedAxis
    up: DirectedAxis
    down: DirectedAxis
    left: DirectedAxis
    right: DirectedAxis

    @classmethod
    def from_front_up(cls, front: DirectedAxis, up: DirectedAxis) -> "CameraAxes":
        """Deriva las 4 caras restantes a partir de front y up.

        right = up rotado -90° alrededor de front (redondeado a la red).
        """
        theta = -HALF_PI * front.direction
        v = rotation_matrix(front.axis, theta) @ as_vector(up.vector())
        right = directed_axis_of(round_to_lattice(v))
        return cls(
            front=front,
            back=front.negate(),
            up=up,
            down=up.negate(),
            left=right.negate(),
            right=right,
        )

    def by_name(self, name: str) -> DirectedAxis:
        return getattr(self, name)


DEFAULT_CAMERA_AXES: CameraAxes = CameraAxes.from_front_up(
    DirectedAxis("z", 1), DirectedAxis("y", 1)
)


def find_front_axis(camera: CameraState) -> DirectedAxis:
    """Eje dirigido más cercano (distancia euclídea) a la posición de la cámara.

    En empate gana el primero en el orden x+, x-, y+, y-, z+, z-.
    """
    pos = as_vector(camera.position)
    front = DIRECTED_AXES[0]
    closest = math.inf
    for directed_axis in DIRECTED_AXES:
        distance = float(np.linalg.norm(pos - as_vector(directed_axis.vector())))
        if distance < closest:
            closest = distance
            front = directed_axis
    return front


def find_up_axis(camera: CameraState, front: DirectedAxis) -> DirectedAxis:
    """Eje "up" de la cámara; necesita el resultado de `find_front_axis`.

    Con controles orbitales, si la cámara no mira la cara de arriba ni la de
    abajo, su cara up es siempre +Y. Si no, se usa el roll de la cámara.
    """
    if front.axis != "y":
        return DirectedAxis("y", 1)

    roll = camera.rotation[2]
    up = UP_AXIS_ROTATION_MAP[front.direction][0][1]
    smallest = math.inf
    for theta, directed_axis in UP_AXIS_ROTATION_MAP[front.direction]:
        difference = abs(theta - roll)
        if difference < smallest:
            smallest = difference
            up = directed_axis
    return up


def resolve_camera_axes(camera: CameraState) -> CameraAxes:
    """Resuelve las 6 caras de la cámara a partir de una foto de su transformación."""
    front = find_front_axis(camera)
    up = find_up_axis(camera, front)
    return CameraAxes.from_front_up(front, up)
