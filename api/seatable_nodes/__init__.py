"""
Nodos SeaTable para un motor de automatización de workflows.

Incluye un nodo de acción (CRUD de filas, metadata, append, list) y un
nodo trigger por polling (filas nuevas o modificadas).
"""

__version__ = "1.0.0"
