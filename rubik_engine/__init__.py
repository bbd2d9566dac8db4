"""Motor de giros para un cubo Rubik 3x3 interactivo en 3D."""

__version__ = "0.1.0"
