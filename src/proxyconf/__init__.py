"""proxyconf — schema-driven validation of KDL proxy configuration."""

__version__ = "0.1.0"
