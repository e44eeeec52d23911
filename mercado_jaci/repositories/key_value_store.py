# ==============================================================================
# ALMACENAMIENTO CLAVE/VALOR - Persistencia local de carrito, login y marca
# ==============================================================================
# Tres implementaciones del mismo contrato (IKeyValueStore):
#   - SessionKeyValueStore  → cookie firmada de Flask (por visitante)
#   - JsonFileKeyValueStore → archivo JSON en disco (por servidor)
#   - MemoryKeyValueStore   → memoria (tests y scripts)
#
# Claves usadas por los services: "cart", "isAuthenticated", "storeConfig".
# Ninguna escritura lanza excepciones hacia los services.
# ==============================================================================

import json
import os
from typing import Any, Dict, MutableMapping, Optional

from mercado_jaci.performance_logger import log_diagnostic
from .base import BaseRepository


class JsonFileKeyValueStore(BaseRepository):
    """
    Todas las claves en un único documento JSON.

    Formato de datos en local_store.json:
    {
        "storeConfig": {"logoUrl": "...", "primaryColor": "#0057b8"}
    }
    """

    def __init__(self, base_path: str, filename: str = 'local_store.json'):
        """
        Args:
            base_path: Directorio de datos
            filename: Nombre del archivo JSON
        """
        super().__init__(os.path.join(base_path, filename))

    def _empty_data(self) -> Dict[str, Any]:
        return {}

    def get(self, key: str, default: Any = None) -> Any:
        data = self._read_raw()
        if not isinstance(data, dict) or key not in data:
            return default
        return data[key]

    def set(self, key: str, value: Any) -> None:
        try:
            data = self._read_raw()
            if not isinstance(data, dict):
                data = {}
            data[key] = value
            self._write_raw(data)
        except (OSError, TypeError, ValueError) as e:
            log_diagnostic(f"No se pudo guardar '{key}' en {self.file_path}", e)


class SessionKeyValueStore:
    """
    Valores serializados como JSON dentro de la sesión de Flask.

    Es el equivalente al localStorage del navegador: cada visitante tiene
    su propio carrito y su propio flag de autenticación.
    """

    def __init__(self, session: MutableMapping[str, Any]):
        """
        Args:
            session: flask.session (o cualquier mapping en tests)
        """
        self._session = session

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._session.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            return default

    def set(self, key: str, value: Any) -> None:
        try:
            self._session[key] = json.dumps(value, ensure_ascii=False)
            if hasattr(self._session, 'modified'):
                self._session.modified = True
        except (TypeError, ValueError, RuntimeError) as e:
            log_diagnostic(f"No se pudo guardar '{key}' en la sesión", e)


class MemoryKeyValueStore:
    """Doble en memoria; serializa igual que los demás para aislar copias."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            return default

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            log_diagnostic(f"No se pudo guardar '{key}' en memoria", e)

    def raw(self, key: str) -> Optional[str]:
        """Valor serializado tal como quedó guardado (para tests)."""
        return self._data.get(key)
