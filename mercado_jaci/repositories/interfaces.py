# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que cumplen los adaptadores de persistencia. Permiten:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Los services dependen de interfaces, NO de implementaciones concretas
#    - Cookie de sesión, archivo JSON o memoria satisfacen IKeyValueStore
#    - Supabase o archivo JSON local satisfacen IProductRepository
#
# 2. TESTING
#    - Dobles en memoria sin tocar archivos ni red
#
# ==============================================================================

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class IKeyValueStore(Protocol):
    """
    Almacenamiento clave/valor durable del lado del cliente.

    get() nunca falla: devuelve default si la clave no existe o si el valor
    guardado no se puede deserializar.
    set() nunca lanza excepciones: un fallo de almacenamiento se registra y
    el estado en memoria sigue siendo el válido durante la sesión.
    """

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """
    Colección remota de productos.

    Todas las operaciones devuelven un resultado en lugar de lanzar:
        {'ok': True, 'data': ...}  o  {'ok': False, 'error': 'mensaje'}

    Forma de fila: {id, name, price, image_url, description, category, tags}
    """

    def fetch_all(self) -> Dict[str, Any]:
        """Todas las filas ordenadas por nombre ascendente."""
        ...

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Inserta y devuelve la fila creada (con id del servidor) en 'data'."""
        ...

    def update(self, product_id: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Actualiza la fila con ese id."""
        ...

    def delete(self, product_id: str) -> Dict[str, Any]:
        """Elimina la fila con ese id."""
        ...
