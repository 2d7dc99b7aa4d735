class RenderError(Exception):
    """Raised when a document cannot be converted to an image."""


class UnsupportedTypeError(RenderError):
    """Raised when the renderer has no conversion for the given MIME type."""
