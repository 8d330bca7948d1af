"""tubedigest: layered AI summaries for YouTube videos."""

__version__ = "0.1.0"
