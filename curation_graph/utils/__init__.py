"""
Shared helpers: short ids, URL handling, Neo4j datetime conversion.
"""
