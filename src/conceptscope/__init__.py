"""conceptscope - incremental exploration of a concept graph backend."""

__version__ = "0.1.0"
