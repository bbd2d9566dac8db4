# rubik_engine/render/cube_gl_widget.py
from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

import numpy as np
from PySide6.QtCore import QElapsedTimer, QPoint, QTimer, Qt, Signal
from PySide6.QtGui import QHideEvent, QKeyEvent, QMouseEvent, QShowEvent, QWheelEvent
from PySide6.QtOpenGLWidgets import QOpenGLWidget

from OpenGL.GL import (
    glBegin,
    glClear,
    glClearColor,
    glColor3f,
    glDisable,
    glEnable,
    glEnd,
    glFlush,
    glLoadIdentity,
    glMatrixMode,
    glReadPixels,
    glVertex3f,
    glViewport,
    GL_BLEND,
    GL_COLOR_BUFFER_BIT,
    GL_DEPTH_BUFFER_BIT,
    GL_DEPTH_TEST,
    GL_DITHER,
    GL_MODELVIEW,
    GL_PROJECTION,
    GL_QUADS,
    GL_RGB,
    GL_UNSIGNED_BYTE,
)
from OpenGL.GLU import gluLookAt, gluPerspective

from rubik_engine.core.lattice import AXIS_INDEX, as_vector, rotation_matrix
from rubik_engine.core.move import Move
from rubik_engine.core.topology import COLOR_RGB, HALF_CUBIE_LENGTH, STICKER_EPSILON, StickerLocation
from rubik_engine.logic.animator import CubiePiece, StickerPiece
from rubik_engine.logic.camera import CameraState, Ray, clamp_polar
from rubik_engine.logic.engine import CubeEngine

Vec3f = Tuple[float, float, float]

FOV: float = 45.0
CUBIE_HALF: float = 0.48
STICKER_HALF: float = 0.42
PLASTIC: Vec3f = (0.05, 0.05, 0.06)
HIGHLIGHT: Vec3f = (0.10, 0.95, 0.85)  # calipso


def describe_move(move: Move) -> str:
    """Texto corto de un giro para la barra de estado (ej: "x[1] -90°")."""
    layers = ",".join(str(v) for v in sorted(move.layers))
    return f"{move.axis}[{layers}] {'+' if move.sign > 0 else '-'}90°"


class CubeGLWidget(QOpenGLWidget):
    """Widget OpenGL que hace de host del motor de giros.

    Características:
    - Render OpenGL clásico (sin shaders) de cubies y stickers en su
      transformación continua.
    - Cámara orbital (botón derecho) con zoom por rueda.
    - Picking por color (funciona con HiDPI) para saber qué sticker se clicó.
    - Teclado y arrastre (botón izquierdo) traducidos por el motor a giros
      relativos a la cámara.
    - Loop de animación con QTimer y delta real medido con QElapsedTimer.
    """

    move_queued = Signal(str)
    repr_changed = Signal(str)

    def __init__(self, engine: CubeEngine, parent=None) -> None:
        """Crea el widget OpenGL y configura estado inicial (cámara, picking, animación).

        Args:
            engine: Motor de giros.
            parent: Widget padre (Qt), opcional.
        """
        super().__init__(parent)
        self.engine: CubeEngine = engine

        # Cámara / orbit (esféricas alrededor del origen)
        self.azimuth: float = math.atan2(4.0, 6.0)
        self.polar: float = math.acos(3.0 / math.sqrt(61.0))
        self.distance: float = math.sqrt(61.0)

        self._last_mouse_pos: QPoint = QPoint()
        self._orbiting: bool = False
        self._dragging_left: bool = False

        # Selección
        self.selected: Optional[StickerLocation] = None

        # Animación
        self._was_idle: bool = True
        self._clock: QElapsedTimer = QElapsedTimer()
        self._anim_timer: QTimer = QTimer(self)
        self._anim_timer.setInterval(engine.config.frame_interval_ms)
        self._anim_timer.timeout.connect(self._on_anim_tick)

        self.setFocusPolicy(Qt.StrongFocus)

    # --------------------------
    # Cámara
    # --------------------------
    def camera(self) -> CameraState:
        """Foto actual de la cámara (la que usa el motor para resolver ejes)."""
        h = max(1, self.height())
        return CameraState.orbit(
            self.distance,
            self.azimuth,
            self.polar,
            fov=FOV,
            aspect=self.width() / float(h),
        )

    # --------------------------
    # OpenGL lifecycle
    # --------------------------
    def initializeGL(self) -> None:
        glClearColor(0.10, 0.10, 0.12, 1.0)
        glEnable(GL_DEPTH_TEST)

    def resizeGL(self, w: int, h: int) -> None:
        """Ajusta viewport y proyección cuando cambia el tamaño del widget."""
        if h == 0:
            h = 1

        dpr = self.devicePixelRatioF()
        fb_w = int(w * dpr)
        fb_h = int(h * dpr)

        glViewport(0, 0, fb_w, fb_h)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(FOV, fb_w / float(fb_h), 0.1, 100.0)

        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def paintGL(self) -> None:
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self._apply_camera()

        glBegin(GL_QUADS)
        for cubie in self.engine.cubies:
            self._draw_cubie(cubie)
        for sticker in self.engine.stickers:
            self._draw_sticker(sticker)
        glEnd()

    def _apply_camera(self) -> None:
        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()
        x, y, z = self.camera().position
        gluLookAt(x, y, z, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0)

    # --------------------------
    # Animación
    # --------------------------
    def showEvent(self, event: QShowEvent) -> None:
        self.engine.set_visible(True)
        self._clock.start()
        self._anim_timer.start()
        super().showEvent(event)

    def hideEvent(self, event: QHideEvent) -> None:
        self.engine.set_visible(False)
        self._anim_timer.stop()
        super().hideEvent(event)

    def _on_anim_tick(self) -> None:
        """Tick del timer: avanza el motor con el tiempo real transcurrido."""
        delta = self._clock.restart() / 1000.0
        changed = self.engine.tick(delta)
        if changed:
            self.update()

        idle = self.engine.is_idle()
        if idle and not self._was_idle:
            self.repr_changed.emit(self.engine.to_repr())
            self.update()
        self._was_idle = idle

    # --------------------------
    # Interacción
    # --------------------------
    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Teclas de giro (U D F B R L M E S X Y Z; minúscula = antihorario)."""
        move = self.engine.handle_key(event.text(), self.camera())
        if move is None:
            super().keyPressEvent(event)
            return
        self.move_queued.emit(describe_move(move))
        event.accept()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Botón derecho para orbitar; botón izquierdo para seleccionar/arrastrar."""
        if event.button() == Qt.RightButton:
            self._orbiting = True
            self._last_mouse_pos = event.pos()
            event.accept()
            return

        if event.button() == Qt.LeftButton:
            x, y = event.position().x(), event.position().y()
            hit = self.pick_sticker(int(x), int(y))
            self.selected = hit
            self._dragging_left = self.engine.pointer_down((x, y), hit, self._ray(x, y))
            self.update()
            event.accept()
            return

        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._orbiting:
            dx = event.position().x() - self._last_mouse_pos.x()
            dy = event.position().y() - self._last_mouse_pos.y()
            self._last_mouse_pos = event.pos()

            sens = 0.007
            self.azimuth -= dx * sens
            self.polar = clamp_polar(self.polar - dy * sens)
            self.update()
            event.accept()
            return

        if self._dragging_left and (event.buttons() & Qt.LeftButton):
            x, y = event.position().x(), event.position().y()
            move = self.engine.pointer_move((x, y), self._ray(x, y))
            if move is not None:
                self._dragging_left = False
                self.move_queued.emit(describe_move(move))
            event.accept()
            return

        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.RightButton and self._orbiting:
            self._orbiting = False
            event.accept()
            return

        if event.button() == Qt.LeftButton:
            self._dragging_left = False
            self.engine.pointer_up()
            event.accept()
            return

        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        delta = event.angleDelta().y() / 120.0
        self.distance -= delta * 0.3
        self.distance = max(4.0, min(20.0, self.distance))
        self.update()
        event.accept()

    def _ray(self, x: float, y: float) -> Ray:
        return self.camera().ray_from_screen(x, y, float(self.width()), float(max(1, self.height())))

    # --------------------------
    # Picking (color picking)
    # --------------------------
    def pick_sticker(self, x: int, y: int) -> Optional[StickerLocation]:
        """Detecta qué sticker se encuentra bajo el cursor usando color picking.

        Returns:
            Ubicación discreta del sticker, o None (también si hay un giro en curso).
        """
        if self.engine.store.is_active_move():
            return None

        dpr = self.devicePixelRatioF()
        gl_x = int(x * dpr)
        gl_y = int((self.height() - y - 1) * dpr)

        self.makeCurrent()

        glDisable(GL_DITHER)
        glDisable(GL_BLEND)

        glClearColor(0.0, 0.0, 0.0, 1.0)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        self._apply_camera()
        mapping = self._draw_all_stickers_pick()

        glFlush()

        pixel = glReadPixels(gl_x, gl_y, 1, 1, GL_RGB, GL_UNSIGNED_BYTE)

        glClearColor(0.10, 0.10, 0.12, 1.0)

        if pixel is None:
            return None

        if isinstance(pixel, (bytes, bytearray)):
            r, g, b = pixel[0], pixel[1], pixel[2]
        else:
            flat = np.asarray(pixel).reshape(-1)
            r, g, b = int(flat[0]), int(flat[1]), int(flat[2])

        pick_id = r + (g << 8) + (b << 16)
        return mapping.get(pick_id)

    def _encode_id_color(self, pick_id: int) -> Vec3f:
        r = (pick_id & 0xFF) / 255.0
        g = ((pick_id >> 8) & 0xFF) / 255.0
        b = ((pick_id >> 16) & 0xFF) / 255.0
        return (r, g, b)

    def _draw_all_stickers_pick(self) -> Dict[int, StickerLocation]:
        """Dibuja todos los stickers con colores codificados y retorna el mapa ID->ubicación."""
        mapping: Dict[int, StickerLocation] = {}

        glBegin(GL_QUADS)
        for pick_id, sticker in enumerate(self.engine.stickers, start=1):
            mapping[pick_id] = sticker.location
            glColor3f(*self._encode_id_color(pick_id))
            for v in self._sticker_quad(sticker, STICKER_HALF + 0.03, HALF_CUBIE_LENGTH + STICKER_EPSILON):
                glVertex3f(*v)
        glEnd()
        return mapping

    # --------------------------
    # Render helpers
    # --------------------------
    def _offset(self, piece) -> np.ndarray:
        """Rotación acumulada del giro en curso de la pieza (identidad si está quieta)."""
        if piece.offset_axis is None:
            return np.identity(3)
        return rotation_matrix(piece.offset_axis, piece.offset_theta)

    def _draw_cubie(self, cubie: CubiePiece) -> None:
        """Cubo negro ("plástico") centrado en la posición continua del cubie."""
        r = self._offset(cubie)
        center = cubie.real_position
        h = CUBIE_HALF

        glColor3f(*PLASTIC)
        for axis in ("x", "y", "z"):
            for direction in (1, -1):
                for v in self._face_quad(axis, direction, h, h):
                    p = center + r @ v
                    glVertex3f(float(p[0]), float(p[1]), float(p[2]))

    def _draw_sticker(self, sticker: StickerPiece) -> None:
        rgb = COLOR_RGB.get(sticker.color, (0.8, 0.8, 0.8))
        d = HALF_CUBIE_LENGTH + STICKER_EPSILON

        if self.selected is not None and self.selected == sticker.location:
            glColor3f(*HIGHLIGHT)
            for v in self._sticker_quad(sticker, STICKER_HALF + 0.04, d - STICKER_EPSILON * 0.5):
                glVertex3f(*v)

        glColor3f(*rgb)
        for v in self._sticker_quad(sticker, STICKER_HALF, d):
            glVertex3f(*v)

    def _sticker_quad(self, sticker: StickerPiece, half: float, out: float) -> List[Vec3f]:
        """Vértices del sticker: quad de la ubicación fija rotado por el giro en curso."""
        facing = sticker.location.facing_vector
        i = next(k for k in range(3) if facing[k] != 0)
        axis = "xyz"[i]
        r = self._offset(sticker)

        out_list: List[Vec3f] = []
        for v in self._face_quad(axis, facing[i], out, half):
            p = sticker.real_position + r @ v
            out_list.append((float(p[0]), float(p[1]), float(p[2])))
        return out_list

    @staticmethod
    def _face_quad(axis: str, direction: int, out: float, half: float) -> List[np.ndarray]:
        """4 vértices (relativos al centro del cubie) de la cara `axis`/`direction`."""
        i = AXIS_INDEX[axis]
        j, k = [a for a in range(3) if a != i]
        corners = ((-1, -1), (1, -1), (1, 1), (-1, 1))

        quad: List[np.ndarray] = []
        for cj, ck in corners:
            v = [0.0, 0.0, 0.0]
            v[i] = direction * out
            v[j] = cj * half
            v[k] = ck * half
            quad.append(as_vector(v))
        return quad
