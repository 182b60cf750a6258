"""repograph: turn a repository's file tree into a laid-out dependency graph."""

__version__ = "0.1.0"
