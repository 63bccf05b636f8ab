"""Transcribe audio/video sources and file them into a self-organizing library."""

__version__ = "0.1.0"
