"""Service layer — startup stages returning ServiceResult.

Services may import from domain, infrastructure, and server.
They must never import from the CLI or output.
"""
