# ==============================================================================
# SERVICIO DE SESIÓN Y NAVEGACIÓN
# ==============================================================================
# Flag de autenticación (persistido), vista actual y overlay del carrito.
#
# NOTA: el login es un acceso provisorio con UNA credencial fija.
# No es una barrera de seguridad: sin usuarios, sin bloqueo por intentos,
# sin expiración de sesión.
# ==============================================================================

from typing import Union

from werkzeug.security import generate_password_hash, check_password_hash

from mercado_jaci.models import AppView
from mercado_jaci.repositories.interfaces import IKeyValueStore


# Credencial de fábrica; config.py permite reemplazarla por variables de entorno
ADMIN_USER = 'admin'
ADMIN_PASSWORD_HASH = generate_password_hash('admin')


class SessionService:
    """
    Servicio de sesión del visitante.

    Responsabilidades:
    - Login/logout del administrador
    - Vista actual (products | checkout | login)
    - Abrir/cerrar el carrito
    """

    STORAGE_KEY = 'isAuthenticated'

    def __init__(
        self,
        kv_store: IKeyValueStore,
        view: Union[AppView, str] = AppView.PRODUCTS,
        is_cart_open: bool = False,
        admin_user: str = None,
        admin_password_hash: str = None,
    ):
        """
        Args:
            kv_store: Almacenamiento clave/valor (persiste isAuthenticated)
            view: Vista inicial
            is_cart_open: Estado inicial del overlay del carrito
            admin_user: Usuario administrador (por defecto ADMIN_USER)
            admin_password_hash: Hash de la contraseña (por defecto ADMIN_PASSWORD_HASH)
        """
        self.kv_store = kv_store
        self.is_authenticated = kv_store.get(self.STORAGE_KEY, False) is True
        self.view = AppView(view)
        self.is_cart_open = bool(is_cart_open)
        self.admin_user = admin_user or ADMIN_USER
        self.admin_password_hash = admin_password_hash or ADMIN_PASSWORD_HASH

    def login(self, user: str, password: str) -> bool:
        """
        Verifica la credencial fija del administrador.

        Returns:
            True si coincide (y persiste el flag); False sin cambiar nada
        """
        if user != self.admin_user or not password:
            return False
        if not check_password_hash(self.admin_password_hash, password):
            return False
        self.is_authenticated = True
        self.kv_store.set(self.STORAGE_KEY, True)
        return True

    def logout(self) -> None:
        """Cierra la sesión de administrador y vuelve al listado."""
        self.is_authenticated = False
        self.kv_store.set(self.STORAGE_KEY, False)
        self.view = AppView.PRODUCTS

    def toggle_cart(self) -> bool:
        self.is_cart_open = not self.is_cart_open
        return self.is_cart_open

    def set_view(self, view: Union[AppView, str]) -> AppView:
        """
        Cambia la vista actual.

        Raises:
            ValueError: Si la vista no pertenece a AppView
        """
        self.view = AppView(view)
        return self.view
