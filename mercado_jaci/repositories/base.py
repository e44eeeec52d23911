# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import os
from typing import Any
from abc import ABC, abstractmethod
import threading


class BaseRepository(ABC):
    """
    Clase base para los repositorios respaldados por un archivo JSON
    (productos locales de desarrollo y configuración de la tienda).
    Lectura/escritura con lock y escritura atómica vía archivo temporal.
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path

    @abstractmethod
    def _empty_data(self) -> Any:
        """Estructura vacía (dict, list) cuando el archivo no existe."""
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.
        Si el archivo está corrupto o no existe, retorna datos vacíos.
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (ValueError, OSError):
                return self._empty_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON.

        Raises:
            OSError: Si hay error de escritura
            TypeError: Si los datos no son serializables
        """
        with self._file_lock:
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except Exception:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise
