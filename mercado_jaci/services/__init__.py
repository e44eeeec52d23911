# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Cada servicio es un contenedor de estado independiente con una API de
# mutación acotada. Reciben sus repositorios por constructor.
# ==============================================================================

from .store_config_service import StoreConfigService
from .catalog_service import CatalogService
from .cart_service import CartService
from .session_service import SessionService
from .order_service import OrderService, compose_order_message, format_price
from .search_service import (
    list_categories,
    admin_search,
    storefront_search,
)

__all__ = [
    'StoreConfigService',
    'CatalogService',
    'CartService',
    'SessionService',
    'OrderService',
    'compose_order_message',
    'format_price',
    'list_categories',
    'admin_search',
    'storefront_search',
]
