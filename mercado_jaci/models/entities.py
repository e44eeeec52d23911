# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio de la tienda.
# Diseñadas para ser independientes del mecanismo de persistencia
# (tabla remota, cookie de sesión o archivo JSON).
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum
import math


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class AppView(str, Enum):
    """Vistas navegables de la tienda. El carrito es un overlay, no una vista."""
    PRODUCTS = "products"
    CHECKOUT = "checkout"
    LOGIN = "login"


class PaymentMethod(str, Enum):
    """Formas de pago aceptadas en la entrega."""
    CASH = "Dinheiro"
    CARD = "Cartão"
    INSTANT_TRANSFER = "PIX"


# Valores por defecto de la marca
DEFAULT_PRIMARY_COLOR = "#0057b8"
DEFAULT_LOGO_URL = "/static/logo.svg"


def parse_tags(raw: Any) -> List[str]:
    """
    Normaliza el campo tags de una fila remota.

    Acepta lista (se usa tal cual), string separado por comas
    (split + trim + descarta vacíos) o ausente (lista vacía).
    """
    if isinstance(raw, str):
        return [t.strip() for t in raw.split(',') if t.strip()]
    if isinstance(raw, list):
        return list(raw)
    return []


def serialize_tags(tags: Optional[List[str]]) -> Optional[str]:
    """Tags como string separado por comas, o None si no hay ninguno."""
    if tags:
        return ','.join(tags)
    return None


# ==============================================================================
# ENTIDADES DE CATÁLOGO
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    La fuente de verdad es la tabla remota; esta entidad es la copia
    en caché que usa la vista.

    Attributes:
        id: Identificador opaco asignado por el servidor ('' en borradores)
        name: Nombre del producto
        price: Precio unitario
        image_url: URL de la imagen
        description: Descripción libre
        category: Categoría libre (puede ser '')
        tags: Etiquetas en orden, se permiten duplicados
    """
    name: str
    price: float
    image_url: str = ''
    description: str = ''
    category: str = ''
    tags: List[str] = field(default_factory=list)
    id: str = ''

    def to_row(self) -> Dict[str, Any]:
        """Fila para insert/update remoto (sin id). Un precio NaN viaja como null."""
        price = None if isinstance(self.price, float) and math.isnan(self.price) else self.price
        return {
            'name': self.name,
            'price': price,
            'image_url': self.image_url,
            'description': self.description,
            'category': self.category or None,
            'tags': serialize_tags(self.tags),
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Product':
        """Crea instancia desde una fila {id, name, price, image_url, ...}."""
        try:
            price = float(row.get('price'))
        except (TypeError, ValueError):
            price = float('nan')
        return cls(
            id=str(row.get('id', '')),
            name=row.get('name') or '',
            price=price,
            image_url=row.get('image_url') or '',
            description=row.get('description') or '',
            category=row.get('category') or '',
            tags=parse_tags(row.get('tags')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para la cookie de sesión / API JSON."""
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'imageUrl': self.image_url,
            'description': self.description,
            'category': self.category,
            'tags': list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde el formato de to_dict."""
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            price=float(data.get('price', 0)),
            image_url=data.get('imageUrl', ''),
            description=data.get('description', ''),
            category=data.get('category') or '',
            tags=parse_tags(data.get('tags')),
        )


# ==============================================================================
# ENTIDADES DE CARRITO
# ==============================================================================

@dataclass
class CartItem:
    """
    Línea del carrito: un producto y su cantidad (siempre >= 1).
    """
    product: Product
    quantity: int = 1

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def subtotal(self) -> float:
        """Precio x cantidad."""
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        data = self.product.to_dict()
        data['quantity'] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        return cls(product=Product.from_dict(data), quantity=int(data['quantity']))


# ==============================================================================
# CONFIGURACIÓN DE TIENDA
# ==============================================================================

@dataclass
class StoreConfig:
    """
    Marca editable por el administrador.

    No se valida el formato del color ni la URL del logo.
    """
    logo_url: str = DEFAULT_LOGO_URL
    primary_color: str = DEFAULT_PRIMARY_COLOR

    def to_dict(self) -> Dict[str, Any]:
        return {'logoUrl': self.logo_url, 'primaryColor': self.primary_color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StoreConfig':
        default = cls()
        return cls(
            logo_url=data.get('logoUrl', default.logo_url),
            primary_color=data.get('primaryColor', default.primary_color),
        )


# ==============================================================================
# CHECKOUT
# ==============================================================================

@dataclass
class CheckoutData:
    """Datos de entrega capturados en el formulario de checkout."""
    name: str
    address: str
    payment_method: PaymentMethod = PaymentMethod.CASH

    @classmethod
    def from_form(cls, form: Dict[str, Any]) -> 'CheckoutData':
        """
        Construye desde un formulario. Forma de pago desconocida
        cae en Dinheiro, que es la opción preseleccionada.
        """
        try:
            method = PaymentMethod(form.get('payment_method', PaymentMethod.CASH.value))
        except ValueError:
            method = PaymentMethod.CASH
        return cls(
            name=form.get('name') or '',
            address=form.get('address') or '',
            payment_method=method,
        )


@dataclass
class OrderMessage:
    """Mensaje de pedido compuesto y su deep link de WhatsApp."""
    text: str
    url: str
