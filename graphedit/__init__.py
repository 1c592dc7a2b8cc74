"""Graph document model, GraphML and GraphViz readers, diff-based undo and editor session support."""

__version__ = "0.7.0"