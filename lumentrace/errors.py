"""Exceptions raised by the renderer."""


class ConfigurationError(ValueError):
    """Render settings that cannot produce an image."""


class RenderError(RuntimeError):
    """A camera or renderer used outside its lifecycle."""
