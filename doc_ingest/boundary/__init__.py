"""
Boundary layer for external system integrations.

Handles the metadata database and the vector store.
"""
