"""mrepo - track many git working copies and operate on them in batch."""

__version__ = "0.3.0"
