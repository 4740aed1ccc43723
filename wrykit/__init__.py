"""HTTP types for custom webview protocols, file-serving handlers and benchmark tooling."""

__version__ = "0.1.0"