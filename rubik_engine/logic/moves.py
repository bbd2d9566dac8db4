# rubik_engine/logic/moves.py
from __future__ import annotations

from typing import List, Set

from rubik_engine.core.move import Move
from rubik_engine.logic.camera import DEFAULT_CAMERA_AXES, CameraAxes
from rubik_engine.logic.input import KEY_MAP, key_to_move

VALID_BASES: Set[str] = set(KEY_MAP)
VALID_SUFFIX: Set[str] = {"", "'", "2"}


def normalize_token(tok: str) -> str:
    """Normaliza un token de movimiento a un formato estándar.

    Reglas principales:
    - Elimina espacios y convierte comilla tipográfica (’ o ‘) a comilla simple (').
    - Las rotaciones del cubo completo se aceptan en minúscula ("x", "y'", "z2")
      y se normalizan a mayúscula.
    - Corrige el caso típico "D2'" -> "D2" (ya que el inverso de un 180° es el mismo).

    Args:
        tok: Token de movimiento (por ejemplo: "R", "U'", "M2", "x'").

    Returns:
        Token normalizado (por ejemplo: "D2'" -> "D2", "x'" -> "X'").

    Raises:
        ValueError: Si la base no es válida o si el sufijo no es válido.
    """
    tok = tok.strip().replace("’", "'").replace("‘", "'")
    if not tok:
        return ""

    base = tok[0]
    suf = tok[1:]

    if base in ("x", "y", "z"):
        base = base.upper()

    if base not in VALID_BASES:
        raise ValueError(f"Movimiento inválido: {tok}")

    if suf == "2'":
        suf = "2"

    if suf not in VALID_SUFFIX:
        raise ValueError(f"Sufijo inválido en: {tok}")

    return base + suf


def token_to_moves(tok: str, camera_axes: CameraAxes = DEFAULT_CAMERA_AXES) -> List[Move]:
    """Convierte un token en cuartos de vuelta.

    El token se interpreta igual que una tecla: la base elige la cara de la
    cámara y "'" equivale a la tecla en minúscula. "2" produce dos cuartos
    de vuelta idénticos.

    Args:
        tok: Token de movimiento.
        camera_axes: Orientación con la que se interpreta (por defecto, F = +Z y U = +Y).

    Returns:
        Lista con uno o dos `Move` (vacía si el token es vacío).

    Raises:
        ValueError: Si el token no es válido.
    """
    tok = normalize_token(tok)
    if not tok:
        return []

    base, suf = tok[0], tok[1:]
    key = base.lower() if suf == "'" else base
    move = key_to_move(key, camera_axes)
    if move is None:
        raise ValueError(f"Movimiento inválido: {tok}")

    return [move, move] if suf == "2" else [move]


def parse_sequence(text: str) -> List[str]:
    """Convierte una secuencia escrita como texto en una lista de movimientos normalizados.

    La entrada debe separar movimientos por espacios. Por ejemplo:
        "R U R' U'" -> ["R", "U", "R'", "U'"]

    Raises:
        ValueError: Si algún token es inválido.
    """
    tokens = [t for t in text.strip().split() if t.strip()]
    out: List[str] = []
    for t in tokens:
        out.append(normalize_token(t))
    return out


def sequence_to_moves(text: str, camera_axes: CameraAxes = DEFAULT_CAMERA_AXES) -> List[Move]:
    """Secuencia de texto -> lista de cuartos de vuelta, validando todo antes de devolver."""
    out: List[Move] = []
    for tok in parse_sequence(text):
        out.extend(token_to_moves(tok, camera_axes))
    return out
