from .mcp_server import create_mcp_server, run_server

__all__ = ["create_mcp_server", "run_server"]
