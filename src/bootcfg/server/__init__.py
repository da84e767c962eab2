"""HTTP API server assembled at the end of startup."""

from bootcfg.server.app import Server, ServerConfig, TransportError, build_server

__all__ = ["Server", "ServerConfig", "TransportError", "build_server"]
