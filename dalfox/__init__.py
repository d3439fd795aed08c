"""XSS scanning service support: WAF detection, HTTP transports, a REST API and a stdio tool server."""

__version__ = "2.0.0"

__all__ = ["__version__"]