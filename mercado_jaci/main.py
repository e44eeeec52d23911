from flask import (
    Blueprint, Flask, abort, current_app, flash, g, jsonify,
    redirect, render_template, request, session, url_for,
)
from functools import wraps
import re
import uuid

# Sistema de profiling y diagnósticos
from mercado_jaci import performance_logger
from mercado_jaci.performance_logger import init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo orquestan request → service → response.
# La lógica de negocio vive en services/.
# ═══════════════════════════════════════════════════════════════════════════
from mercado_jaci.app_container import AppContainer
from mercado_jaci.config import load_settings
from mercado_jaci.models import AppView, CheckoutData, PaymentMethod, Product
from mercado_jaci.repositories import SessionKeyValueStore
from mercado_jaci.services import (
    admin_search,
    format_price,
    list_categories,
    storefront_search,
)

bp = Blueprint('tienda', __name__)

# Claves de navegación en la cookie de sesión (no pasan por el
# almacenamiento durable: se pierden al cerrar el navegador)
VIEW_KEY = '_view'
CART_OPEN_KEY = '_cart_open'

DEFAULT_IMAGE_URL = 'https://picsum.photos/400/300'


# ═══════════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

def create_app(overrides=None, container=None):
    """
    Crea la app Flask.

    Args:
        overrides: Valores de configuración que reemplazan al entorno
        container: AppContainer ya armado (tests con repositorios en memoria)
    """
    app = Flask(__name__)
    app.config.update(load_settings(overrides))

    performance_logger.configure(
        logs_dir=app.config['LOGS_DIR'],
        enabled=app.config['PROFILING'],
    )
    init_profiling(app)

    app.extensions['mercado_jaci'] = container or AppContainer(app.config)
    app.register_blueprint(bp)
    return app


# ═══════════════════════════════════════════════════════════════════════════════
# ACCESO A SERVICIOS DESDE LAS RUTAS
# ═══════════════════════════════════════════════════════════════════════════════

def get_container():
    return current_app.extensions['mercado_jaci']


def _visitor_store():
    return SessionKeyValueStore(session)


def get_cart():
    """Carrito del visitante (uno por request)."""
    if 'cart' not in g:
        g.cart = get_container().cart_service(_visitor_store())
    return g.cart


def get_state():
    """Sesión/navegación del visitante (una por request)."""
    if 'state' not in g:
        try:
            view = AppView(session.get(VIEW_KEY, AppView.PRODUCTS.value))
        except ValueError:
            view = AppView.PRODUCTS
        g.state = get_container().session_service(
            _visitor_store(),
            view=view,
            is_cart_open=bool(session.get(CART_OPEN_KEY, False)),
        )
    return g.state


def save_navigation(state):
    session[VIEW_KEY] = state.view.value
    session[CART_OPEN_KEY] = state.is_cart_open


def to_int(v, default=None):
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def parse_price(raw):
    """
    Precio del formulario admin. Acepta coma decimal.
    Un valor ilegible queda como NaN (no se rechaza).
    """
    try:
        return float(str(raw).strip().replace(',', '.'))
    except (TypeError, ValueError):
        return float('nan')


def parse_tags_input(raw):
    """'a, b,,c' -> ['a', 'b', 'c']"""
    return [t.strip() for t in (raw or '').split(',') if t.strip()]


def product_from_form(form, product_id=''):
    """Arma un Product desde el modal de alta/edición del panel admin."""
    name = form.get('name') or ''
    image_url = form.get('image_url') or ''
    if not image_url:
        seed = re.sub(r'\s+', '', name)
        image_url = f'https://picsum.photos/seed/{seed}/400/300'
    return Product(
        id=product_id,
        name=name,
        price=parse_price(form.get('price')),
        description=form.get('description') or '',
        image_url=image_url,
        category=form.get('category') or '',
        tags=parse_tags_input(form.get('tags')),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SEGURIDAD - CSRF, acceso admin, headers
# ═══════════════════════════════════════════════════════════════════════════════

def generate_csrf_token():
    if 'csrf_token' not in session:
        session['csrf_token'] = uuid.uuid4().hex
    return session['csrf_token']


def verify_csrf(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method == 'POST':
            token = session.get('csrf_token')
            form_token = (
                request.form.get('csrf_token') or
                request.headers.get('X-CSRF-Token') or
                request.headers.get('X-CSRFToken')
            )
            if not form_token and request.is_json:
                json_data = request.get_json(silent=True) or {}
                form_token = json_data.get('csrf_token')

            if not token or not form_token or token != form_token:
                if request.path.startswith('/api/'):
                    return {"ok": False, "error": "CSRF token inválido"}, 403
                flash('Sessão expirada. Por favor tente novamente.', 'warning')
                return redirect(url_for('tienda.index'))
        return f(*args, **kwargs)
    return wrapper


def admin_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        state = get_state()
        if not state.is_authenticated:
            flash("Faça login como administrador.", "warning")
            state.set_view(AppView.LOGIN)
            save_navigation(state)
            return redirect(url_for('tienda.index'))
        return f(*args, **kwargs)
    return wrapper


@bp.app_context_processor
def inject_globals():
    store_config = get_container().store_config_service
    return {
        'csrf_token': generate_csrf_token(),
        'store_config': store_config.config,
        'css_variables': store_config.css_variables(),
        'format_price': format_price,
        'cart': get_cart(),
        'state': get_state(),
    }


@bp.after_app_request
def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


@bp.route('/logs/<path:filename>')
@bp.route('/data/<path:filename>')
def block_sensitive_routes(filename):
    """Bloquea acceso a carpetas de logs y datos."""
    return "Not Found", 404


# ═══════════════════════════════════════════════════════════════════════════════
# TIENDA
# ═══════════════════════════════════════════════════════════════════════════════

@bp.route("/")
def index():
    catalog = get_container().catalog_service
    # Cada carga de página relee la tabla remota
    catalog.load()
    state = get_state()

    if state.is_authenticated:
        tab = request.args.get('tab', 'products')
        search = request.args.get('q', '')
        editing = None
        if request.args.get('editar'):
            editing = catalog.get_product(request.args['editar'])
        return render_template(
            "admin.html",
            tab=tab if tab in ('products', 'store') else 'products',
            search=search,
            products=admin_search(catalog.products, search),
            editing=editing,
            creating=request.args.get('novo') == '1',
            default_image_url=DEFAULT_IMAGE_URL,
        )

    search = request.args.get('q', '')
    category = request.args.get('categoria', '')
    return render_template(
        "store.html",
        search=search,
        category=category,
        categories=list_categories(catalog.products),
        products=storefront_search(catalog.products, search, category),
        loading=catalog.loading,
        payment_methods=[m.value for m in PaymentMethod],
    )


@bp.route("/api/products")
def api_products():
    catalog = get_container().catalog_service
    catalog.load()
    search = request.args.get('q', '')
    category = request.args.get('categoria', '')
    return jsonify({
        'ok': True,
        'loading': catalog.loading,
        'categories': list_categories(catalog.products),
        'products': [p.to_dict() for p in storefront_search(catalog.products, search, category)],
    })


@bp.route("/api/cart")
def api_cart():
    """Resumen del carrito del visitante (items, unidades y monto)."""
    return jsonify(get_cart().summary())


# ═══════════════════════════════════════════════════════════════════════════════
# CARRITO
# ═══════════════════════════════════════════════════════════════════════════════

@bp.route("/cart/add/<product_id>", methods=["POST"])
@verify_csrf
def cart_add(product_id):
    catalog = get_container().catalog_service
    catalog.ensure_loaded()
    product = catalog.get_product(product_id)
    if product is None:
        flash("Produto não encontrado.", "danger")
        return redirect(url_for('tienda.index'))
    get_cart().add_to_cart(product)
    flash(f"{product.name} adicionado ao carrinho.", "success")
    return redirect(url_for('tienda.index'))


@bp.route("/cart/update/<product_id>", methods=["POST"])
@verify_csrf
def cart_update(product_id):
    quantity = to_int(request.form.get('quantity'))
    if quantity is None:
        flash("Quantidade inválida.", "warning")
        return redirect(url_for('tienda.index'))
    get_cart().update_cart_quantity(product_id, quantity)
    return redirect(url_for('tienda.index'))


@bp.route("/cart/remove/<product_id>", methods=["POST"])
@verify_csrf
def cart_remove(product_id):
    get_cart().remove_from_cart(product_id)
    return redirect(url_for('tienda.index'))


@bp.route("/cart/toggle", methods=["POST"])
@verify_csrf
def cart_toggle():
    state = get_state()
    state.toggle_cart()
    save_navigation(state)
    return redirect(url_for('tienda.index'))


@bp.route("/view/<view>", methods=["POST"])
@verify_csrf
def change_view(view):
    state = get_state()
    try:
        state.set_view(view)
    except ValueError:
        abort(404)
    # "Finalizar Pedido" cierra el overlay antes de ir al checkout
    if request.form.get('close_cart') and state.is_cart_open:
        state.toggle_cart()
    save_navigation(state)
    return redirect(url_for('tienda.index'))


# ═══════════════════════════════════════════════════════════════════════════════
# CHECKOUT
# ═══════════════════════════════════════════════════════════════════════════════

@bp.route("/checkout", methods=["POST"])
@verify_csrf
def checkout():
    cart = get_cart()
    if not cart.items:
        flash("Seu carrinho está vazio.", "warning")
        return redirect(url_for('tienda.index'))

    state = get_state()
    data = CheckoutData.from_form(request.form)
    order = get_container().order_service.send_order(cart, state, data)
    save_navigation(state)
    flash('Seu pedido foi enviado! O Mercado do Jaci entrará em contato para confirmar.', 'success')
    return redirect(order.url)


# ═══════════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

@bp.route("/login", methods=["POST"])
@verify_csrf
def login():
    user = request.form.get("user") or ""
    password = request.form.get("password") or ""
    state = get_state()
    if state.login(user, password):
        session.permanent = True
        state.set_view(AppView.PRODUCTS)
        save_navigation(state)
        flash("Bem-vindo, administrador.", "success")
        return redirect(url_for('tienda.index'))

    state.set_view(AppView.LOGIN)
    save_navigation(state)
    flash("Usuário ou senha inválidos.", "danger")
    return redirect(url_for('tienda.index'))


@bp.route("/logout", methods=["POST"])
@verify_csrf
def logout():
    state = get_state()
    state.logout()
    save_navigation(state)
    flash("Sessão encerrada.", "info")
    return redirect(url_for('tienda.index'))


# ═══════════════════════════════════════════════════════════════════════════════
# PANEL DE ADMINISTRACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

@bp.route("/admin/products", methods=["POST"])
@verify_csrf
@admin_required
def create_product():
    result = get_container().catalog_service.add_product(product_from_form(request.form))
    if result['ok']:
        flash(f"Produto {result['product'].name} adicionado.", "success")
    else:
        flash("Não foi possível adicionar o produto.", "danger")
    return redirect(url_for('tienda.index', tab='products'))


@bp.route("/admin/products/<product_id>", methods=["POST"])
@verify_csrf
@admin_required
def edit_product(product_id):
    catalog = get_container().catalog_service
    catalog.ensure_loaded()
    if catalog.get_product(product_id) is None:
        flash("Produto não encontrado.", "danger")
        return redirect(url_for('tienda.index', tab='products'))
    result = catalog.update_product(product_from_form(request.form, product_id))
    if result['ok']:
        flash("Produto atualizado.", "success")
    else:
        flash("Não foi possível atualizar o produto.", "danger")
    return redirect(url_for('tienda.index', tab='products'))


@bp.route("/admin/products/<product_id>/delete", methods=["POST"])
@verify_csrf
@admin_required
def delete_product(product_id):
    result = get_container().catalog_service.delete_product(product_id)
    if result['ok']:
        flash("Produto excluído.", "success")
    else:
        flash("Não foi possível excluir o produto.", "danger")
    return redirect(url_for('tienda.index', tab='products'))


@bp.route("/admin/store", methods=["POST"])
@verify_csrf
@admin_required
def store_settings():
    get_container().store_config_service.update_config(
        logo_url=request.form.get('logo_url', ''),
        primary_color=request.form.get('primary_color', ''),
    )
    flash('Configurações salvas com sucesso!', 'success')
    return redirect(url_for('tienda.index', tab='store'))
