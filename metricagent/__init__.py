"""Agent that samples interpreter runtime metrics and reports them in batches to an HTTP endpoint."""

__version__ = "0.1.0"
__all__ = ["app", "collector", "config", "models", "sender"]