# ==============================================================================
# SISTEMA DE LOGS Y PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y de las llamadas a la tabla remota, y registra
# diagnósticos de errores (fallos de red, de almacenamiento) sin interrumpir
# la experiencia del usuario.
# Guarda logs legibles en /logs/ para análisis humano.
#
# ACTIVAR/DESACTIVAR: Variable ENABLE_PROFILING (o MERCADO_PROFILING=0)
# ==============================================================================

import os
import time
import threading
from datetime import datetime
from functools import wraps
from collections import defaultdict

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = os.environ.get('MERCADO_PROFILING', '1') != '0'

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

LOGS_DIR = os.environ.get(
    'MERCADO_LOGS_DIR',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logs')
)

PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'
ERRORS_LOG = 'errors.log'

# Nombres legibles de rutas
ROUTE_NAMES = {
    'GET /': 'Ver tienda',
    'GET /api/products': 'Listar productos (API)',
    'GET /api/cart': 'Ver carrito (API)',
    'POST /cart/add/<product_id>': 'Agregar al carrito',
    'POST /cart/update/<product_id>': 'Cambiar cantidad',
    'POST /cart/remove/<product_id>': 'Quitar del carrito',
    'POST /cart/toggle': 'Abrir/cerrar carrito',
    'POST /view/<view>': 'Cambiar vista',
    'POST /checkout': 'Enviar pedido',
    'POST /login': 'Iniciar sesión',
    'POST /logout': 'Cerrar sesión',
    'POST /admin/products': 'Crear producto',
    'POST /admin/products/<product_id>': 'Editar producto',
    'POST /admin/products/<product_id>/delete': 'Eliminar producto',
    'POST /admin/store': 'Guardar configuración de tienda',
}

_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


def configure(logs_dir=None, enabled=None):
    """
    Cambia el directorio de logs y/o activa el profiling.
    Usado por create_app() con la configuración de la app.
    """
    global LOGS_DIR, ENABLE_PROFILING
    if logs_dir:
        LOGS_DIR = logs_dir
    if enabled is not None:
        ENABLE_PROFILING = bool(enabled)


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES DE LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    """Obtiene timestamp legible"""
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _log_path(filename):
    return os.path.join(LOGS_DIR, filename)


def _write_log(filename, content):
    """Escribe contenido a un archivo de log (thread-safe)"""
    try:
        with _write_lock:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(_log_path(filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        pass  # Un log que falla no debe afectar la app


def log_diagnostic(context, error, level='ERROR'):
    """
    Registra un diagnóstico: línea en consola con etiqueta y entrada
    en errors.log.

    Args:
        context: Qué se intentaba hacer ("Erro ao buscar produtos")
        error: Excepción o mensaje
        level: Etiqueta ('ERROR', 'ADVERTENCIA')
    """
    print(f"[{level}] {context}: {error}")
    _write_log(ERRORS_LOG, f"[{level}] {_get_timestamp()} {context}: {error}\n")


def _get_route_name(method, path, rule=None):
    """Nombre legible para una ruta; si no hay, la ruta cruda."""
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]
    return key


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None):
    """Registra el rendimiento de una ruta en performance.log"""
    if not ENABLE_PROFILING:
        return

    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Acción: {_get_route_name(method, path, rule)}
Usuario: {user or 'cliente'}
Ruta: {method} {path}
Tiempo: {time_ms:.0f} ms
"""
    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Registra una ruta lenta en slow_routes.log

    Args:
        level: 'WARNING' (>300ms) o 'CRITICAL' (>700ms)
    """
    if not ENABLE_PROFILING:
        return

    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL
    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {_get_route_name(method, path, rule)}
Usuario: {user or 'cliente'}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {threshold} ms)
────────────────────────────────────────
"""
    _write_log(SLOW_ROUTES_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """
    Registra hooks before_request y after_request en la app Flask.
    """
    if not ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request, session
        from mercado_jaci.repositories import SessionKeyValueStore

        if not hasattr(g, 'start_time'):
            return response
        if request.path.startswith('/static'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        rule = str(request.url_rule) if request.url_rule else request.path
        is_admin = SessionKeyValueStore(session).get('isAuthenticated') is True
        user = 'admin' if is_admin else None

        log_route_performance(request.method, request.path, rule, elapsed, user)
        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(request.method, request.path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(request.method, request.path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas
    (llamadas a la tabla remota).

    Uso:
        @profile_function
        def fetch_all(self): ...

        @profile_function(name="Insertar producto")
        def insert(self, row): ...
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not ENABLE_PROFILING:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms
                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 4️⃣ ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'configure',
    'init_profiling',
    'profile_function',
    'log_diagnostic',
    'get_function_stats',
    'reset_stats',
]
