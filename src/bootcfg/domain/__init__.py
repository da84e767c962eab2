"""Domain layer — listen addresses and group configuration.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, server, or config.
"""
