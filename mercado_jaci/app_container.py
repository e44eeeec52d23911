# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Arma repositorios y servicios a partir de la configuración de la app.
#
# Dos alcances:
#   - De la aplicación (uno por create_app): catálogo, marca de la tienda,
#     pedidos. Se crean perezosamente y se reutilizan.
#   - Del visitante (uno por request): carrito y sesión, construidos sobre
#     el almacenamiento clave/valor de la cookie del visitante.
#
# No hay instancia global: cada app Flask guarda el suyo en
# app.extensions['mercado_jaci'] y los tests crean uno propio.
# ==============================================================================

from typing import Any, Dict, Optional

from mercado_jaci.models import AppView
from mercado_jaci.repositories import (
    IKeyValueStore,
    IProductRepository,
    JsonFileKeyValueStore,
    JsonProductRepository,
    SupabaseProductRepository,
)
from mercado_jaci.services import (
    CartService,
    CatalogService,
    OrderService,
    SessionService,
    StoreConfigService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(app.config)
        catalog = container.catalog_service
        cart = container.cart_service(SessionKeyValueStore(session))
    """

    def __init__(
        self,
        settings: Dict[str, Any],
        product_repo: Optional[IProductRepository] = None,
        config_store: Optional[IKeyValueStore] = None,
    ):
        """
        Args:
            settings: Configuración (app.config o dict equivalente)
            product_repo: Repositorio de productos ya construido (tests)
            config_store: Almacenamiento de la marca ya construido (tests)
        """
        self._settings = settings

        # Repositorios (lazy loading)
        self._product_repo = product_repo
        self._config_store = config_store

        # Servicios de la aplicación (lazy loading)
        self._catalog_service: Optional[CatalogService] = None
        self._store_config_service: Optional[StoreConfigService] = None
        self._order_service: Optional[OrderService] = None

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def product_repo(self) -> IProductRepository:
        """Supabase si hay URL configurada; si no, products.json local."""
        if self._product_repo is None:
            url = self._settings.get('SUPABASE_URL')
            if url:
                self._product_repo = SupabaseProductRepository(
                    url,
                    self._settings.get('SUPABASE_KEY', ''),
                    table=self._settings.get('SUPABASE_TABLE', 'products'),
                )
            else:
                self._product_repo = JsonProductRepository(self._settings['DATA_DIR'])
        return self._product_repo

    @property
    def config_store(self) -> IKeyValueStore:
        """Almacenamiento de la marca (local_store.json del servidor)."""
        if self._config_store is None:
            self._config_store = JsonFileKeyValueStore(self._settings['DATA_DIR'])
        return self._config_store

    # =========================================================================
    # SERVICIOS DE LA APLICACIÓN
    # =========================================================================

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.product_repo)
        return self._catalog_service

    @property
    def store_config_service(self) -> StoreConfigService:
        if self._store_config_service is None:
            self._store_config_service = StoreConfigService(self.config_store)
        return self._store_config_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(self._settings.get('WHATSAPP_NUMBER'))
        return self._order_service

    # =========================================================================
    # SERVICIOS DEL VISITANTE
    # =========================================================================

    def cart_service(self, kv_store: IKeyValueStore) -> CartService:
        return CartService(kv_store)

    def session_service(
        self,
        kv_store: IKeyValueStore,
        view: Any = AppView.PRODUCTS,
        is_cart_open: bool = False,
    ) -> SessionService:
        return SessionService(
            kv_store,
            view=view,
            is_cart_open=is_cart_open,
            admin_user=self._settings.get('ADMIN_USER'),
            admin_password_hash=self._settings.get('ADMIN_PASSWORD_HASH'),
        )

