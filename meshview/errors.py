"""
Errors raised while loading a model file.

Every failure carries a readable message naming the file and the offending
line or field, so the caller can log it and decide whether to fall back to
another asset.
"""


class MeshLoadError(Exception):
    """Base class for every model loading failure"""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class MeshIOError(MeshLoadError):
    """The model file could not be opened or read"""


class InvalidVertexComponent(MeshLoadError):
    """A `v` or `vn` record holds text that is not a number"""

    def __init__(self, axis, line, line_number=None, path=None, kind="vertex"):
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"Invalid {kind} {axis}{where}: {line!r}", path)
        self.axis = axis
        self.line = line
        self.line_number = line_number
        self.kind = kind


class InvalidGltfJson(MeshLoadError):
    """The glTF document is not JSON or does not have the expected structure"""


class BufferReadError(MeshLoadError):
    """The glTF binary buffer could not be read"""


class BufferRangeError(MeshLoadError):
    """An accessor reaches past the end of the binary buffer"""

    def __init__(self, what, offset, length, buffer_length, path=None):
        super().__init__(
            f"{what} needs bytes [{offset}, {offset + length}) "
            f"but the buffer holds only {buffer_length} bytes",
            path,
        )
        self.offset = offset
        self.length = length
        self.buffer_length = buffer_length


class UnsupportedIndexType(MeshLoadError):
    """The index accessor uses a componentType other than 5121, 5123 or 5125"""

    def __init__(self, component_type, path=None):
        super().__init__(f"Unsupported index component type: {component_type}", path)
        self.component_type = component_type


class UnsupportedGltfFeature(MeshLoadError):
    """The glTF document needs something outside the supported subset"""


class UnsupportedFormat(MeshLoadError):
    """The file suffix does not select any parser"""

    def __init__(self, suffix, accepted, path=None):
        accepted_text = " and ".join(accepted)
        super().__init__(
            f"Unsupported file format {suffix or '(none)'!r}, only {accepted_text} "
            f"(NOT .glb) files are supported.",
            path,
        )
        self.suffix = suffix
        self.accepted = tuple(accepted)


class MeshIndexError(MeshLoadError):
    """A triangle names a vertex that does not exist"""
