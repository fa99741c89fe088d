"""
Matrices and buffers a renderer needs to draw a loaded Mesh.

Everything here is plain numpy: matrices are row-major 4x4 float32 arrays
acting on column vectors (p' = M @ p). Transpose before handing them to an
API that expects column-major data (see `uniform_bytes`).
"""
import cv2
import numpy as np

from meshview.config import (
    CAMERA_DISTANCE,
    FAR_PLANE,
    FIELD_OF_VIEW,
    NEAR_PLANE,
    ROTATION_STEP,
)


def translation(offset):
    matrix = np.eye(4, dtype=np.float32)
    matrix[:3, 3] = offset
    return matrix


def uniform_scale(factor):
    matrix = np.eye(4, dtype=np.float32)
    matrix[:3, :3] *= factor
    return matrix


def rotation_y(angle):
    """Rotation of `angle` radians around +Y"""
    # Convert rotation vector to rotation matrix
    rotM, _ = cv2.Rodrigues(np.array([0.0, angle, 0.0]))
    matrix = np.eye(4, dtype=np.float32)
    matrix[:3, :3] = rotM
    return matrix


def model_matrix(norm, rotation=0.0):
    """
    Model transform for a normalized mesh.

    Moves the bounding-box center to the origin, scales to the target
    extent, then spins the model around Y.
    """
    center = np.asarray(norm.center, dtype=np.float32)
    return rotation_y(rotation) @ uniform_scale(norm.scale) @ translation(-center)


def look_at(eye, target, up):
    """Right-handed view matrix with the camera at `eye` looking at `target`"""
    eye = np.asarray(eye, dtype=np.float64)
    forward = np.asarray(target, dtype=np.float64) - eye
    forward /= np.linalg.norm(forward)
    side = np.cross(forward, up)
    side /= np.linalg.norm(side)
    true_up = np.cross(side, forward)

    matrix = np.eye(4, dtype=np.float32)
    matrix[0, :3] = side
    matrix[1, :3] = true_up
    matrix[2, :3] = -forward
    matrix[:3, 3] = [-np.dot(side, eye), -np.dot(true_up, eye), np.dot(forward, eye)]
    return matrix


def perspective(fovy, aspect, near, far):
    """
    Perspective projection with OpenGL clip conventions (depth mapped to [-1, 1]).

    Args:
        fovy: Vertical field of view in radians
        aspect: Viewport width / height
        near: Distance to the near plane
        far: Distance to the far plane
    """
    f = 1.0 / np.tan(fovy / 2)
    matrix = np.zeros((4, 4), dtype=np.float32)
    matrix[0, 0] = f / aspect
    matrix[1, 1] = f
    matrix[2, 2] = (far + near) / (near - far)
    matrix[2, 3] = (2 * far * near) / (near - far)
    matrix[3, 2] = -1.0
    return matrix


def camera_position(distance=CAMERA_DISTANCE):
    return np.array([distance, distance * 0.5, distance])


def model_view_projection(norm, rotation, aspect, camera_distance=CAMERA_DISTANCE):
    """Combined projection @ view @ model matrix for one frame"""
    model = model_matrix(norm, rotation)
    view = look_at(camera_position(camera_distance), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    proj = perspective(FIELD_OF_VIEW, aspect, NEAR_PLANE, FAR_PLANE)
    return proj @ view @ model


def uniform_bytes(matrix):
    """Pack a 4x4 matrix as column-major little-endian float32"""
    # OpenGL and WGSL uniforms use column-major order
    return np.ascontiguousarray(np.asarray(matrix, dtype='<f4').T).tobytes()


def vertex_buffer(mesh):
    """Vertex positions packed as consecutive 3 x float32 records"""
    return np.ascontiguousarray(mesh.vertices, dtype='<f4').tobytes()


def index_buffer(mesh):
    """Triangle indices packed as little-endian uint32"""
    return np.ascontiguousarray(mesh.indices, dtype='<u4').tobytes()


class FrameState:
    """
    Per-frame view state of a spinning model viewer.

    Holds the model normalization and the pieces that change while the
    window is open (rotation angle, viewport size).
    """

    def __init__(self, norm, width, height, camera_distance=CAMERA_DISTANCE):
        self.norm = norm
        self.width = width
        self.height = height
        self.camera_distance = camera_distance
        self.rotation = 0.0

    @property
    def aspect_ratio(self):
        return self.width / self.height

    def advance(self, step=ROTATION_STEP):
        self.rotation += step

    def resize(self, width, height):
        # Minimized windows report a zero size, keep the last usable one
        if width > 0 and height > 0:
            self.width = width
            self.height = height

    def mvp(self):
        return model_view_projection(self.norm, self.rotation, self.aspect_ratio,
                                     self.camera_distance)
