"""jotter - a multi-line text composer with vim-style modal editing."""

__version__ = "0.1.0"
