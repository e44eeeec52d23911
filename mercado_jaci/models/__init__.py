# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos de la tienda
# ==============================================================================
# Entidades del dominio definidas con dataclasses.
# Independientes del mecanismo de persistencia (Supabase, cookie o JSON).
# ==============================================================================

from .entities import (
    # Catálogo
    Product,
    parse_tags,
    serialize_tags,

    # Carrito
    CartItem,

    # Tienda
    StoreConfig,
    DEFAULT_LOGO_URL,
    DEFAULT_PRIMARY_COLOR,

    # Sesión
    AppView,

    # Checkout
    CheckoutData,
    PaymentMethod,
    OrderMessage,
)

__all__ = [
    'Product',
    'parse_tags',
    'serialize_tags',
    'CartItem',
    'StoreConfig',
    'DEFAULT_LOGO_URL',
    'DEFAULT_PRIMARY_COLOR',
    'AppView',
    'CheckoutData',
    'PaymentMethod',
    'OrderMessage',
]
