# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Encapsula toda la persistencia de la tienda.
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos (IKeyValueStore, IProductRepository)
# ├── base.py                → Clase base para archivos JSON
# ├── key_value_store.py     → Carrito, login y marca (sesión / JSON / memoria)
# └── product_repository.py  → Tabla de productos (Supabase / JSON local)
# ==============================================================================

from .interfaces import IKeyValueStore, IProductRepository
from .base import BaseRepository
from .key_value_store import (
    JsonFileKeyValueStore,
    SessionKeyValueStore,
    MemoryKeyValueStore,
)
from .product_repository import SupabaseProductRepository, JsonProductRepository

__all__ = [
    # Interfaces
    'IKeyValueStore',
    'IProductRepository',

    # Clase base
    'BaseRepository',

    # Clave/valor
    'JsonFileKeyValueStore',
    'SessionKeyValueStore',
    'MemoryKeyValueStore',

    # Productos
    'SupabaseProductRepository',
    'JsonProductRepository',
]
