"""AskBoard - question-and-answer community backend."""

__version__ = "0.1.0"
