"""Ask a chat-completion API questions from the terminal."""

__version__ = "0.1.0"
