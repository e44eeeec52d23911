# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Convierte el carrito + datos de entrega en un mensaje de WhatsApp.
#
# El envío es "dispara y olvida": no hay confirmación de que el mensaje
# haya salido. El carrito se vacía igual apenas se genera el link.
# ==============================================================================

from typing import Iterable
from urllib.parse import quote

from mercado_jaci.models import AppView, CartItem, CheckoutData, OrderMessage


STORE_NAME = 'Jaci Supermercados'
DEFAULT_WHATSAPP_NUMBER = '551138998270304'

# Caracteres que encodeURIComponent deja sin escapar
_URI_COMPONENT_SAFE = "-_.!~*'()"


def format_price(value: float) -> str:
    """20.0 -> 'R$ 20,00' (dos decimales, coma decimal, sin separador de miles)."""
    return 'R$ ' + f'{value:.2f}'.replace('.', ',')


def compose_order_message(
    cart_items: Iterable[CartItem],
    checkout_data: CheckoutData,
    phone: str = DEFAULT_WHATSAPP_NUMBER,
) -> OrderMessage:
    """
    Arma el mensaje del pedido y su deep link.

    Args:
        cart_items: Items del carrito
        checkout_data: Nombre, dirección y forma de pago
        phone: Número de WhatsApp de la tienda

    Returns:
        OrderMessage(text, url)
    """
    items = list(cart_items)
    total = sum((item.subtotal for item in items), 0.0)

    lines = [f'*Novo Pedido - {STORE_NAME}*', '', '*Itens:*']
    for item in items:
        lines.append(f'- {item.quantity}x {item.product.name}: {format_price(item.subtotal)}')
    lines += [
        '',
        f'*Total do Pedido: {format_price(total)}*',
        '',
        '*Dados para Entrega:*',
        f'Nome: {checkout_data.name}',
        f'Endereço: {checkout_data.address}',
        f'Forma de Pagamento: {checkout_data.payment_method.value}',
        '',
        'Aguardando confirmação do pedido.',
    ]
    text = '\n'.join(lines)

    url = f'https://wa.me/{phone}?text={quote(text, safe=_URI_COMPONENT_SAFE)}'
    return OrderMessage(text=text, url=url)


class OrderService:
    """
    Servicio de checkout.

    Responsabilidades:
    - Componer el mensaje del pedido
    - Vaciar el carrito y volver al listado
    """

    def __init__(self, phone: str = DEFAULT_WHATSAPP_NUMBER):
        """
        Args:
            phone: Número de WhatsApp que recibe los pedidos
        """
        self.phone = phone or DEFAULT_WHATSAPP_NUMBER

    def send_order(self, cart_service, session_service, checkout_data: CheckoutData) -> OrderMessage:
        """
        Genera el link del pedido, vacía el carrito y vuelve a la vista
        de productos. El llamador abre el link en una pestaña nueva.
        """
        order = compose_order_message(cart_service.items, checkout_data, phone=self.phone)
        cart_service.clear_cart()
        session_service.set_view(AppView.PRODUCTS)
        return order
