"""Secrets handling for coding agents: formats, backends, audit log, daemon support and execution."""

__version__ = "0.1.0"