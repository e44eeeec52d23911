# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Acceso a la colección de productos:
#   - SupabaseProductRepository → tabla "products" vía la API REST de Supabase
#   - JsonProductRepository     → products.json local (desarrollo sin red)
#
# Ambos devuelven resultados {'ok': ..., 'data'/'error': ...} y nunca lanzan
# excepciones hacia el CatalogService.
# ==============================================================================

import os
import uuid
from typing import Any, Dict, List, Optional

import httpx

from mercado_jaci.performance_logger import profile_function
from .base import BaseRepository


class SupabaseProductRepository:
    """
    Cliente de la tabla remota de productos (PostgREST).

    Endpoints:
        GET    /rest/v1/products?select=*&order=name.asc
        POST   /rest/v1/products            (Prefer: return=representation)
        PATCH  /rest/v1/products?id=eq.<id>
        DELETE /rest/v1/products?id=eq.<id>
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = 'products',
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: URL del proyecto (https://xyz.supabase.co)
            api_key: Clave anon/service del proyecto
            table: Nombre de la tabla
            timeout: Timeout de cada request en segundos
            transport: Transporte httpx alternativo (tests)
        """
        self.table = table
        self.client = httpx.Client(
            base_url=base_url.rstrip('/') + '/rest/v1',
            timeout=timeout,
            transport=transport,
            headers={
                'apikey': api_key,
                'Authorization': f'Bearer {api_key}',
                'Accept': 'application/json',
                'Content-Type': 'application/json',
            },
        )

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            response = self.client.request(
                method, f'/{self.table}', params=params, json=json, headers=headers
            )
            response.raise_for_status()
            data = response.json() if response.content else None
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:200]
            return {'ok': False, 'error': f'HTTP {e.response.status_code}: {detail}'}
        except httpx.HTTPError as e:
            return {'ok': False, 'error': f'{type(e).__name__}: {e}'}
        except ValueError as e:
            return {'ok': False, 'error': f'Respuesta inválida: {e}'}
        return {'ok': True, 'data': data}

    @profile_function(name='Supabase: listar productos')
    def fetch_all(self) -> Dict[str, Any]:
        result = self._request('GET', params={'select': '*', 'order': 'name.asc'})
        if result['ok'] and not isinstance(result['data'], list):
            return {'ok': False, 'error': 'Respuesta inválida: se esperaba una lista'}
        return result

    @profile_function(name='Supabase: insertar producto')
    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        result = self._request(
            'POST', json=row, headers={'Prefer': 'return=representation'}
        )
        if not result['ok']:
            return result
        data = result['data']
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            return {'ok': False, 'error': 'Respuesta inválida: fila no devuelta'}
        return {'ok': True, 'data': data}

    @profile_function(name='Supabase: actualizar producto')
    def update(self, product_id: str, row: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('PATCH', params={'id': f'eq.{product_id}'}, json=row)

    @profile_function(name='Supabase: eliminar producto')
    def delete(self, product_id: str) -> Dict[str, Any]:
        return self._request('DELETE', params={'id': f'eq.{product_id}'})

    def close(self) -> None:
        self.client.close()


class JsonProductRepository(BaseRepository):
    """
    Colección de productos en un archivo local.

    Formato de datos en products.json:
    [
        {"id": "3f2a...", "name": "Arroz", "price": 20.0, "image_url": "...",
         "description": "...", "category": "Mercearia", "tags": "grãos,5kg"}
    ]
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio de datos
        """
        super().__init__(os.path.join(base_path, 'products.json'))

    def _empty_data(self) -> List[Dict[str, Any]]:
        return []

    def _rows(self) -> List[Dict[str, Any]]:
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def _save(self, rows: List[Dict[str, Any]]) -> Optional[str]:
        try:
            self._write_raw(rows)
        except (OSError, TypeError, ValueError) as e:
            return f'{type(e).__name__}: {e}'
        return None

    @profile_function(name='JSON: listar productos')
    def fetch_all(self) -> Dict[str, Any]:
        rows = sorted(self._rows(), key=lambda r: str(r.get('name') or ''))
        return {'ok': True, 'data': rows}

    @profile_function(name='JSON: insertar producto')
    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._rows()
        record = dict(row)
        record['id'] = uuid.uuid4().hex
        rows.append(record)
        error = self._save(rows)
        if error:
            return {'ok': False, 'error': error}
        return {'ok': True, 'data': record}

    @profile_function(name='JSON: actualizar producto')
    def update(self, product_id: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._rows()
        for record in rows:
            if str(record.get('id')) == str(product_id):
                record.update(row)
                break
        else:
            return {'ok': False, 'error': f'Producto {product_id} no encontrado'}
        error = self._save(rows)
        if error:
            return {'ok': False, 'error': error}
        return {'ok': True, 'data': None}

    @profile_function(name='JSON: eliminar producto')
    def delete(self, product_id: str) -> Dict[str, Any]:
        rows = self._rows()
        remaining = [r for r in rows if str(r.get('id')) != str(product_id)]
        if len(remaining) == len(rows):
            return {'ok': False, 'error': f'Producto {product_id} no encontrado'}
        error = self._save(remaining)
        if error:
            return {'ok': False, 'error': error}
        return {'ok': True, 'data': None}
