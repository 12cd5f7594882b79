"""BZP - scaffold local-first agent projects backed by an Ollama runtime."""

__version__ = "0.1.0"
