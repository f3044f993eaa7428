"""Core application wiring: configuration, logging, metrics, dependencies."""
