"""
Mercado Jaci - Tienda online de Jaci Supermercados.

Catálogo público, carrito por visitante, pedido por WhatsApp y un panel
de administración para productos y marca de la tienda.
"""

__version__ = '1.0.0'
