# ==============================================================================
# BÚSQUEDA Y FILTROS DEL CATÁLOGO
# ==============================================================================
# Funciones puras sobre la lista de productos en memoria.
# El resultado conserva siempre el orden del catálogo (nombre ascendente);
# nunca se reordena por relevancia.
#
# Hay DOS criterios de búsqueda distintos, se conservan ambos:
# - Panel admin: la consulta debe ser substring del texto concatenado
#   "nombre categoría descripción tag1 tag2 ..."
# - Tienda: la consulta debe estar en el nombre, O en la categoría, O en
#   alguna tag (la descripción no cuenta), Y además coincidir exactamente
#   con la categoría elegida en el select (si hay una).
# ==============================================================================

from typing import Iterable, List, Optional

from mercado_jaci.models import Product


def _normalize_query(query: Optional[str]) -> str:
    return (query or '').strip().lower()


def list_categories(products: Iterable[Product]) -> List[str]:
    """
    Categorías distintas, sin vacías, con espacios recortados.

    Orden: sorted() de Python (por punto de código, distingue mayúsculas:
    "Bebidas" va antes que "hortifruti" y que "bebidas").
    """
    categories = set()
    for product in products:
        category = (product.category or '').strip()
        if category:
            categories.add(category)
    return sorted(categories)


def admin_matches(product: Product, query: Optional[str]) -> bool:
    search = _normalize_query(query)
    if not search:
        return True
    text = ' '.join([
        product.name or '',
        product.category or '',
        product.description or '',
        *(product.tags or []),
    ]).lower()
    return search in text


def admin_search(products: Iterable[Product], query: Optional[str]) -> List[Product]:
    """Filtro de la tabla del panel de administración."""
    return [p for p in products if admin_matches(p, query)]


def storefront_matches(
    product: Product,
    query: Optional[str],
    category: Optional[str] = None,
) -> bool:
    search = _normalize_query(query)

    name_match = search in (product.name or '').lower()
    category_match = not search or search in (product.category or '').lower()
    tags_match = any(search in tag.lower() for tag in (product.tags or []))

    category_filter_match = not category or product.category == category

    return (name_match or category_match or tags_match) and category_filter_match


def storefront_search(
    products: Iterable[Product],
    query: Optional[str],
    category: Optional[str] = None,
) -> List[Product]:
    """
    Filtro del listado público.

    Args:
        products: Catálogo en orden de visualización
        query: Texto libre ('' = todo)
        category: Categoría elegida en el select (None o '' = todas)
    """
    return [p for p in products if storefront_matches(p, query, category)]
