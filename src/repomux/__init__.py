"""repomux - pick a git repository and open a tmux workspace for it."""

__version__ = "0.1.0"
