"""20i Gateway.

HTTP and MCP front ends for the 20i hosting API: domains, hosting packages,
databases, email, WordPress, CDN and VPS, behind Basic authentication.
"""

__version__ = "0.1.0"
