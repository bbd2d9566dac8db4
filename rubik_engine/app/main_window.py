# rubik_engine/app/main_window.py
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from rubik_engine.core.config import EngineConfig
from rubik_engine.logic.engine import CubeEngine
from rubik_engine.render.cube_gl_widget import CubeGLWidget, describe_move

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Ventana principal: vista 3D del cubo + panel con la representación y la cola.

    Esta clase coordina:
    - El motor de giros (`CubeEngine`)
    - La visualización e input 3D (`CubeGLWidget`)
    - La entrada de secuencias en notación
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        super().__init__()
        self.setWindowTitle("Rubik 3D - PySide6")

        # --- Motor + render ---
        self.engine: CubeEngine = CubeEngine(config)
        self.gl_widget: CubeGLWidget = CubeGLWidget(self.engine, self)

        # --- UI ---
        root = QWidget()
        root_layout = QHBoxLayout(root)
        root_layout.addWidget(self.gl_widget, 1)

        panel = QWidget()
        panel_layout = QVBoxLayout(panel)
        panel.setFixedWidth(320)

        self.lbl_state = QLabel("")
        panel_layout.addWidget(self.lbl_state)

        panel_layout.addWidget(QLabel("Representación (U D F B R L)"))
        self.lbl_repr = QLabel("")
        self.lbl_repr.setFont(QFont("Monospace"))
        self.lbl_repr.setWordWrap(True)
        panel_layout.addWidget(self.lbl_repr)

        self.btn_reset = QPushButton("Reset")
        panel_layout.addWidget(self.btn_reset)

        panel_layout.addWidget(QLabel("Aplicar secuencia (ej: R U R' U')"))
        self.txt_seq = QLineEdit()
        self.txt_seq.setPlaceholderText("Ej: R U R' U'")
        panel_layout.addWidget(self.txt_seq)
        self.btn_apply = QPushButton("Aplicar")
        panel_layout.addWidget(self.btn_apply)

        panel_layout.addWidget(QLabel("Teclas: U D F B R L M E S X Y Z (minúscula = antihorario)"))

        panel_layout.addWidget(QLabel("Giros encolados"))
        self.list_history = QListWidget()
        panel_layout.addWidget(self.list_history, 1)

        root_layout.addWidget(panel)
        self.setCentralWidget(root)

        # --- Conexiones ---
        self.btn_reset.clicked.connect(self.on_reset)
        self.btn_apply.clicked.connect(self.on_apply_sequence)
        self.txt_seq.returnPressed.connect(self.on_apply_sequence)
        self.gl_widget.move_queued.connect(self.on_move_queued)
        self.gl_widget.repr_changed.connect(self.on_repr_changed)

        self.btn_reset.setShortcut("Ctrl+R")

        self.on_repr_changed(self.engine.to_repr())

    # -------------------
    # Callbacks
    # -------------------
    def on_move_queued(self, text: str) -> None:
        self.list_history.addItem(text)
        self.list_history.scrollToBottom()
        self.statusBar().showMessage(f"Move: {text}", 1200)

    def on_repr_changed(self, repr_str: str) -> None:
        """Actualiza la representación de 54 caracteres (una cara por línea)."""
        self.lbl_repr.setText("\n".join(repr_str[i:i + 9] for i in range(0, 54, 9)))
        self.lbl_state.setText(
            "Estado: resuelto ✅" if self.engine.model().is_solved() else "Estado: mezclado 🔄"
        )

    def on_reset(self) -> None:
        self.engine.reset()
        self.list_history.clear()
        self.gl_widget.selected = None
        self.gl_widget.update()
        self.on_repr_changed(self.engine.to_repr())

    def on_apply_sequence(self) -> None:
        """Encola una secuencia ingresada por el usuario (ej: 'R U R' U'')."""
        seq = self.txt_seq.text().strip()
        if not seq:
            return

        try:
            moves = self.engine.queue_sequence(seq)
        except ValueError as exc:
            logger.warning("Secuencia inválida %r: %s", seq, exc)
            QMessageBox.warning(self, "Secuencia inválida", str(exc))
            return

        for move in moves:
            self.on_move_queued(describe_move(move))
        self.txt_seq.clear()
        self.gl_widget.setFocus()
