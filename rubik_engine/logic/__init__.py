from rubik_engine.logic.camera import CameraAxes, CameraState, resolve_camera_axes
from rubik_engine.logic.engine import CubeEngine

__all__ = ["CameraAxes", "CameraState", "CubeEngine", "resolve_camera_axes"]
