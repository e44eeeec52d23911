# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Todo se lee de variables de entorno con valores por defecto para desarrollo.
#
# VARIABLES:
#   MERCADO_SECRET_KEY      → firma de la cookie de sesión (OBLIGATORIA en producción)
#   SUPABASE_URL            → URL del proyecto; vacío = products.json local
#   SUPABASE_KEY            → clave anon del proyecto
#   SUPABASE_TABLE          → tabla de productos (por defecto "products")
#   MERCADO_DATA_DIR        → carpeta de products.json y local_store.json
#   MERCADO_LOGS_DIR        → carpeta de logs
#   MERCADO_PROFILING       → "0" desactiva el profiling de rutas
#   MERCADO_WHATSAPP        → número que recibe los pedidos
#   MERCADO_ADMIN_USER      → usuario administrador (por defecto "admin")
#   MERCADO_ADMIN_PASSWORD  → contraseña administrador (por defecto "admin")
#   PRODUCTION_MODE         → "1" activa cookies seguras y avisos
# ==============================================================================

import os
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from werkzeug.security import generate_password_hash

from mercado_jaci.services.order_service import DEFAULT_WHATSAPP_NUMBER


BASE = os.path.dirname(os.path.abspath(__file__))

_DEFAULT_SECRET = "mercado_jaci_dev_secret_key_change_in_production"


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Arma el diccionario de configuración de Flask.

    Args:
        overrides: Valores que reemplazan a los del entorno (tests)

    Returns:
        Diccionario listo para app.config.update()
    """
    env = os.environ
    production_mode = env.get('PRODUCTION_MODE', '0') == '1'
    secret_key = env.get('MERCADO_SECRET_KEY')

    if production_mode and not secret_key:
        print("[ADVERTENCIA] PRODUCTION_MODE activo sin MERCADO_SECRET_KEY definida")
        print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")

    settings = {
        'PRODUCTION_MODE': production_mode,
        'SECRET_KEY': secret_key or _DEFAULT_SECRET,
        'SUPABASE_URL': env.get('SUPABASE_URL', ''),
        'SUPABASE_KEY': env.get('SUPABASE_KEY', ''),
        'SUPABASE_TABLE': env.get('SUPABASE_TABLE', 'products'),
        'DATA_DIR': env.get('MERCADO_DATA_DIR', os.path.join(BASE, 'data')),
        'LOGS_DIR': env.get('MERCADO_LOGS_DIR', os.path.join(BASE, 'logs')),
        'PROFILING': env.get('MERCADO_PROFILING', '1') != '0',
        'WHATSAPP_NUMBER': env.get('MERCADO_WHATSAPP', DEFAULT_WHATSAPP_NUMBER),
        'ADMIN_USER': env.get('MERCADO_ADMIN_USER', 'admin'),
        'ADMIN_PASSWORD': env.get('MERCADO_ADMIN_PASSWORD', 'admin'),

        # Cookies de sesión (el carrito y el login viven aquí)
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SAMESITE': 'Lax',
        'SESSION_COOKIE_SECURE': production_mode,
        'PERMANENT_SESSION_LIFETIME': timedelta(days=30),
    }
    settings.update(overrides or {})

    # Solo se guarda el hash de la contraseña
    settings['ADMIN_PASSWORD_HASH'] = generate_password_hash(settings.pop('ADMIN_PASSWORD'))
    return settings
