"""
External integrations for the grading engine.

Modules:
- sandbox_client: HTTP client for the code execution sandbox
"""
from .sandbox_client import ExecutionRequest, SandboxClient

__all__ = ["ExecutionRequest", "SandboxClient"]
