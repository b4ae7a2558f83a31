"""Natural-language tech pack editing and multi-view image revisions."""

__version__ = "0.1.0"
