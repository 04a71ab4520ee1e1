"""
Application Layer

Query facades, the tool protocol boundary, the HTTP surface and the
container that assembles them.
"""
