"""Renderer error taxonomy.

Every renderer method raises one of these (or lets an error from the
underlying ``send`` propagate unchanged). Nothing here is retried: once a
status line has gone out, the response cannot be rewritten.
"""


class RenderError(Exception):
    """Base class for failures while producing a response body."""


class SerializationError(RenderError):
    """The payload could not be encoded as JSON or XML."""


class InvalidArgumentError(RenderError, ValueError):
    """A caller-supplied argument is unusable (e.g. empty JSONP callback)."""


class SourceReadError(RenderError, OSError):
    """Reading a binary source failed before anything was sent."""
