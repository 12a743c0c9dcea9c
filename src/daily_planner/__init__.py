"""Local single-user task planner with a slash-command console."""

__version__ = "0.1.0"
