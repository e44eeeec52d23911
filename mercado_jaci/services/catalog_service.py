# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Caché local de la tabla remota de productos.
#
# REGLA: el estado local solo cambia cuando el servidor confirmó la operación.
# Sin reintentos ni actualizaciones optimistas; un fallo se registra y el
# catálogo queda como estaba.
# ==============================================================================

from typing import Any, Dict, List, Optional

from mercado_jaci.models import Product
from mercado_jaci.performance_logger import log_diagnostic
from mercado_jaci.repositories.interfaces import IProductRepository


class CatalogService:
    """
    Servicio para el catálogo de productos.

    Responsabilidades:
    - Cargar todos los productos (orden por nombre ascendente)
    - Alta, edición y baja contra la tabla remota
    - Reconciliar la lista local con la respuesta del servidor
    """

    def __init__(self, product_repo: IProductRepository):
        """
        Args:
            product_repo: Repositorio de productos (Supabase o JSON local)
        """
        self.product_repo = product_repo
        self.products: List[Product] = []
        self.loading = False
        self.loaded = False

    # =========================================================================
    # LECTURA
    # =========================================================================

    def load(self) -> Dict[str, Any]:
        """
        Recarga el catálogo completo.

        En caso de fallo conserva la lista anterior (vacía en la primera carga)
        y siempre termina con loading=False.
        """
        self.loading = True
        try:
            result = self.product_repo.fetch_all()
            if not result['ok']:
                log_diagnostic('Erro ao buscar produtos', result['error'])
                return result
            self.products = [Product.from_row(row) for row in result['data']]
            self.loaded = True
            return {'ok': True, 'count': len(self.products)}
        finally:
            self.loading = False

    def ensure_loaded(self) -> None:
        """Carga el catálogo la primera vez que se necesita."""
        if not self.loaded and not self.loading:
            self.load()

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    # =========================================================================
    # ESCRITURA (solo administrador)
    # =========================================================================

    def add_product(self, draft: Product) -> Dict[str, Any]:
        """
        Inserta un producto nuevo. El id lo asigna el servidor.

        Returns:
            Dict con ok y el producto creado
        """
        result = self.product_repo.insert(draft.to_row())
        if not result['ok']:
            log_diagnostic('Erro ao adicionar produto', result['error'])
            return result
        created = Product.from_row(result['data'])
        self.products.append(created)
        return {'ok': True, 'product': created}

    def update_product(self, product: Product) -> Dict[str, Any]:
        """
        Actualiza un producto existente (clave: id).
        La entrada local se reemplaza por el producto enviado.
        """
        result = self.product_repo.update(product.id, product.to_row())
        if not result['ok']:
            log_diagnostic('Erro ao atualizar produto', result['error'])
            return result
        self.products = [product if p.id == product.id else p for p in self.products]
        return {'ok': True, 'product': product}

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        """Elimina un producto por id."""
        result = self.product_repo.delete(product_id)
        if not result['ok']:
            log_diagnostic('Erro ao excluir produto', result['error'])
            return result
        self.products = [p for p in self.products if p.id != product_id]
        return {'ok': True}
