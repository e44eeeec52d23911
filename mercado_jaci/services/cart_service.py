# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Centraliza la lógica del carrito de compras del cliente.
# El carrito se persiste en el almacenamiento clave/valor bajo "cart"
# (en la web: la cookie de sesión del visitante).
#
# INVARIANTES:
# - Como máximo un item por id de producto
# - Cantidad siempre >= 1 (llegar a 0 elimina el item)
# ==============================================================================

from typing import Any, Dict, List

from mercado_jaci.models import CartItem, Product
from mercado_jaci.repositories.interfaces import IKeyValueStore


class CartService:
    """
    Servicio para gestión del carrito de compras.

    Responsabilidades:
    - Agregar/eliminar items del carrito
    - Cambiar cantidades
    - Calcular totales (derivados, nunca guardados)
    - Limpiar carrito

    Cada mutación vuelve a persistir la lista completa.
    """

    STORAGE_KEY = 'cart'

    def __init__(self, kv_store: IKeyValueStore):
        """
        Args:
            kv_store: Almacenamiento clave/valor
        """
        self.kv_store = kv_store
        self.items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        """
        Lee el carrito guardado. Entradas corruptas o con cantidad <= 0 se
        descartan y las repetidas se fusionan.
        """
        stored = self.kv_store.get(self.STORAGE_KEY, [])
        if not isinstance(stored, list):
            return []

        items: List[CartItem] = []
        by_id: Dict[str, CartItem] = {}
        for raw in stored:
            try:
                item = CartItem.from_dict(raw)
            except (KeyError, TypeError, ValueError, AttributeError):
                continue
            if item.quantity <= 0:
                continue
            existing = by_id.get(item.id)
            if existing:
                existing.quantity += item.quantity
            else:
                by_id[item.id] = item
                items.append(item)
        return items

    def _save(self) -> None:
        self.kv_store.set(self.STORAGE_KEY, [item.to_dict() for item in self.items])

    def _find(self, product_id: str):
        for item in self.items:
            if item.id == product_id:
                return item
        return None

    # =========================================================================
    # MUTACIONES
    # =========================================================================

    def add_to_cart(self, product: Product) -> Dict[str, Any]:
        """
        Agrega una unidad del producto.
        Si ya está en el carrito, incrementa su cantidad en 1.
        """
        existing = self._find(product.id)
        if existing:
            return self.update_cart_quantity(product.id, existing.quantity + 1)

        self.items.append(CartItem(product=product, quantity=1))
        self._save()
        return self.summary()

    def update_cart_quantity(self, product_id: str, quantity: int) -> Dict[str, Any]:
        """
        Cambia la cantidad de un item. Cantidad <= 0 elimina el item.
        El orden de los items no cambia; un id desconocido no hace nada.
        """
        if quantity <= 0:
            return self.remove_from_cart(product_id)

        self.items = [
            CartItem(product=item.product, quantity=quantity) if item.id == product_id else item
            for item in self.items
        ]
        self._save()
        return self.summary()

    def remove_from_cart(self, product_id: str) -> Dict[str, Any]:
        """Elimina el item del producto (no-op si no existe)."""
        self.items = [item for item in self.items if item.id != product_id]
        self._save()
        return self.summary()

    def clear_cart(self) -> Dict[str, Any]:
        """Vacía el carrito completamente."""
        self.items = []
        self._save()
        return self.summary()

    # =========================================================================
    # TOTALES
    # =========================================================================

    def total_price(self) -> float:
        """Suma de precio x cantidad; 0 para el carrito vacío."""
        return sum((item.subtotal for item in self.items), 0.0)

    def item_count(self) -> int:
        """Unidades totales (badge del encabezado)."""
        return sum(item.quantity for item in self.items)

    def summary(self) -> Dict[str, Any]:
        return {
            'ok': True,
            'items': [item.to_dict() for item in self.items],
            'total_items': self.item_count(),
            'total_monto': round(self.total_price(), 2),
            'items_count': len(self.items),
        }
