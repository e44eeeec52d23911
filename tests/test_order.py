from urllib.parse import parse_qs, urlparse

from mercado_jaci.models import AppView, CartItem, CheckoutData, PaymentMethod, Product
from mercado_jaci.services import CartService, OrderService, SessionService, compose_order_message, format_price


def arroz_cart():
    return [CartItem(Product(id='1', name='Arroz', price=20.00), quantity=2)]


def test_format_price_uses_decimal_comma():
    assert format_price(40) == 'R$ 40,00'
    assert format_price(4.5) == 'R$ 4,50'
    assert format_price(1234.567) == 'R$ 1234,57'


def test_message_lines():
    data = CheckoutData(name='Ana', address='Rua X, 1', payment_method=PaymentMethod.CASH)
    order = compose_order_message(arroz_cart(), data)
    lines = order.text.split('\n')

    assert lines[0] == '*Novo Pedido - Jaci Supermercados*'
    assert '- 2x Arroz: R$ 40,00' in lines
    assert '*Total do Pedido: R$ 40,00*' in lines
    assert 'Nome: Ana' in lines
    assert 'Endereço: Rua X, 1' in lines
    assert 'Forma de Pagamento: Dinheiro' in lines
    assert lines[-1] == 'Aguardando confirmação do pedido.'


def test_fields_are_copied_verbatim():
    data = CheckoutData(name='  Ana *negrito*  ', address='Rua X\nApto 2', payment_method=PaymentMethod.INSTANT_TRANSFER)
    order = compose_order_message(arroz_cart(), data)
    assert 'Nome:   Ana *negrito*  ' in order.text
    assert 'Endereço: Rua X\nApto 2' in order.text
    assert 'Forma de Pagamento: PIX' in order.text


def test_url_encodes_the_whole_text():
    data = CheckoutData(name='Ana', address='Rua X, 1')
    order = compose_order_message(arroz_cart(), data, phone='5511999999999')
    parsed = urlparse(order.url)

    assert parsed.scheme == 'https'
    assert parsed.netloc == 'wa.me'
    assert parsed.path == '/5511999999999'
    assert ' ' not in order.url
    assert '%0A' in order.url
    assert parse_qs(parsed.query)['text'][0] == order.text


def test_checkout_data_unknown_method_falls_back_to_cash():
    data = CheckoutData.from_form({'name': 'Ana', 'address': 'Rua X', 'payment_method': 'Boleto'})
    assert data.payment_method is PaymentMethod.CASH
    data = CheckoutData.from_form({'name': 'Ana', 'address': 'Rua X', 'payment_method': 'Cartão'})
    assert data.payment_method is PaymentMethod.CARD


def test_send_order_clears_cart_and_returns_to_products(kv):
    cart = CartService(kv)
    cart.add_to_cart(Product(id='1', name='Arroz', price=20.0))
    session = SessionService(kv, view=AppView.CHECKOUT)

    order = OrderService().send_order(cart, session, CheckoutData(name='Ana', address='Rua X, 1'))

    assert order.url.startswith('https://wa.me/551138998270304?text=')
    assert '- 1x Arroz: R$ 20,00' in order.text
    assert cart.items == []
    assert kv.get('cart') == []
    assert session.view is AppView.PRODUCTS


def test_order_service_without_phone_uses_store_number():
    assert OrderService(None).phone == '551138998270304'
