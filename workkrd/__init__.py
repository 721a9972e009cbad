"""Work.krd PDF rendering service."""

__version__ = "0.1.0"
