# escope/client.py
import requests
import logging

from .config import HEADERS, REQUEST_TIMEOUT
from .datasource import ClusterDataSource
from .errors import DataSourceError, OperationTimeoutError


class ElasticsearchClient(ClusterDataSource):
    """Gestiona la conexión y las peticiones a la API de Elasticsearch."""
    def __init__(self, host, user, password, verify_ssl=False, timeout=REQUEST_TIMEOUT):
        self.base_url = host.rstrip('/') if host else host
        self.auth = (user, password) if user else None
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    def check_connection(self):
        """Comprueba que el clúster responde y devuelve nombre y versión."""
        if not self.base_url:
            logging.error("La variable de entorno ES_HOST no está configurada.")
            raise DataSourceError("Connection check", "ES_HOST is not configured")
        info = self.get("", operation="Connection check", filter_path=["cluster_name", "version.number"])
        logging.info(f"Conectado a Elasticsearch. Cluster: {info.get('cluster_name')}, Versión: {info.get('version', {}).get('number')}")
        return info

    def get(self, path, operation, params=None, filter_path=None, timeout=None):
        """
        GET sobre la API. Cualquier fallo se propaga como DataSourceError con el nombre de la operación.
        `timeout` reemplaza al timeout del cliente para esta petición.
        """
        url = f"{self.base_url}/{path}"

        query_params = params.copy() if params else {}
        if filter_path:
            query_params['filter_path'] = ",".join(filter_path)

        try:
            response = requests.get(url, auth=self.auth, verify=self.verify_ssl, headers=HEADERS,
                                    params=query_params, timeout=timeout or self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logging.warning(f"Timeout en petición GET a {url}: {e}")
            raise OperationTimeoutError(operation) from e
        except requests.exceptions.RequestException as e:
            logging.warning(f"Fallo en petición GET a {url}: {e}")
            raise DataSourceError(operation, str(e)) from e

        # Si la respuesta está vacía (posible con filter_path), devuelve un diccionario vacío
        if not response.text:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logging.warning(f"Respuesta no es JSON válido desde {url}")
            raise DataSourceError(operation, "malformed JSON response") from e

    def get_cluster_health(self, timeout=None):
        return self.get("_cluster/health", operation="Cluster health request", timeout=timeout)

    def get_cluster_stats(self, timeout=None):
        return self.get("_cluster/stats", operation="Cluster stats request", timeout=timeout)

    def get_nodes(self, timeout=None):
        return self.get("_nodes", operation="Nodes request", timeout=timeout)

    def get_nodes_stats(self, timeout=None):
        return self.get("_nodes/stats/os,jvm,fs", operation="Nodes stats request", timeout=timeout)

    def get_shards(self, timeout=None):
        return self.get("_cat/shards", operation="Shards request",
                        params={'format': 'json', 'h': 'index,shard,prirep,state,docs,store,ip,node'}, timeout=timeout)

    def get_indices(self, timeout=None):
        return self.get("_cat/indices", operation="Indices request",
                        params={'format': 'json', 'h': 'health,status,index,uuid,pri,rep,docs.count,store.size'}, timeout=timeout)

    def get_index_stats(self, index="", timeout=None):
        path = f"{index}/_stats" if index else "_stats"
        return self.get(path, operation="Index stats request", timeout=timeout)
