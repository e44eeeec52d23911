# ==============================================================================
# SERVICIO DE CONFIGURACIÓN DE TIENDA
# ==============================================================================
# Logo y color principal editables por el administrador.
# Se persiste en el almacenamiento clave/valor bajo "storeConfig".
# No se sincroniza con la tabla remota.
# ==============================================================================

from typing import Any, Dict, Optional

from mercado_jaci.models import StoreConfig
from mercado_jaci.repositories.interfaces import IKeyValueStore


class StoreConfigService:
    """
    Servicio para la marca de la tienda.

    Responsabilidades:
    - Cargar la configuración al iniciar (o la de fábrica si no existe)
    - Aplicar actualizaciones parciales y persistirlas
    - Exponer el color principal como variable CSS global
    """

    STORAGE_KEY = 'storeConfig'
    CONFIG_FIELDS = ('logo_url', 'primary_color')

    def __init__(self, kv_store: IKeyValueStore):
        """
        Args:
            kv_store: Almacenamiento clave/valor
        """
        self.kv_store = kv_store
        stored = kv_store.get(self.STORAGE_KEY, None)
        if isinstance(stored, dict):
            self._config = StoreConfig.from_dict(stored)
        else:
            self._config = StoreConfig()
        self._css_variables: Dict[str, str] = {}
        self._apply_primary_color()

    @property
    def config(self) -> StoreConfig:
        return self._config

    def update_config(self, partial: Optional[Dict[str, Any]] = None, **fields: Any) -> StoreConfig:
        """
        Mezcla los campos recibidos con la configuración actual.

        Acepta un dict o kwargs: update_config(primary_color='#ff0000').
        Campos desconocidos se ignoran. No se valida color ni URL.

        Returns:
            La configuración resultante
        """
        changes = dict(partial or {})
        changes.update(fields)
        current = StoreConfig.from_dict(self._config.to_dict())
        for name in self.CONFIG_FIELDS:
            if name in changes:
                setattr(current, name, changes[name])
        self._config = current
        self.kv_store.set(self.STORAGE_KEY, current.to_dict())
        self._apply_primary_color()
        return current

    def _apply_primary_color(self) -> None:
        self._css_variables['--primary-color'] = self._config.primary_color

    def css_variables(self) -> Dict[str, str]:
        """Variables CSS globales que consume la plantilla base."""
        return dict(self._css_variables)
