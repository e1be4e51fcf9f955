"""
Configuration module for settings and graph store connections.
"""
from .settings import Settings, get_settings, reset_settings
from .database import Neo4jConfig, create_neo4j_service

__all__ = [
    'Settings',
    'get_settings',
    'reset_settings',
    'Neo4jConfig',
    'create_neo4j_service',
]
