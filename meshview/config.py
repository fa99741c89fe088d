import math

# Configuration
DEFAULT_MODEL_PATH = "test_files/cube.obj"  # Known-good asset loaded when the requested model fails
SUPPORTED_SUFFIXES = (".obj", ".gltf")

# Normalization: models are fitted into a cube of this edge length
TARGET_EXTENT = 2.0

# Camera
CAMERA_DISTANCE = 3.0  # Adjust this to zoom in/out
FIELD_OF_VIEW = math.pi / 4
NEAR_PLANE = 0.1
FAR_PLANE = 100.0
ROTATION_STEP = 0.01  # Radians per frame around the Y axis
