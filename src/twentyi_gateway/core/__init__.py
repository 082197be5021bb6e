"""Core gateway logic: configuration, authentication, route table, API client.

This module is framework-agnostic. It has no dependency on MCP, Starlette,
or any server framework. Both the HTTP gateway and the MCP server import
from here.
"""
