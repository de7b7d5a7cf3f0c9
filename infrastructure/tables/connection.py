# ============================================================================
# TABLE SERVICE CONNECTION
# ============================================================================
# STATUS: Infrastructure - Process-wide Azure Table service clients
# PURPOSE: Lazily create one async TableServiceClient per storage endpoint
# CREATED: 19 OCT 2026
# ============================================================================
"""
Table Service Connection

Manages the async Azure Table service clients shared by every repository.
One client per storage endpoint; created at most once per process.

Supports two authentication methods:
1. Connection string (local emulator, account keys) - STORAGE_CONNECTION_STRING
2. Managed Identity (Azure) - STORAGE_ACCOUNT_URL

Transport policy applied to every request made through a client:
- Fixed-delay retry (retry_delay_ms, max_retries)
- Read/connect timeout (maximum_execution_seconds)
- Location mode (primary / secondary endpoint)

Usage:
    from infrastructure.tables import init_table_service, close_table_service

    await init_table_service(storage)     # at startup (optional, lazy otherwise)
    service = get_table_service(storage)
    ...
    await close_table_service()           # at shutdown
"""

import logging
import os
import threading
from typing import Any, Dict, Optional

from azure.core.pipeline.policies import RetryMode
from azure.data.tables.aio import TableServiceClient

from core.config import LocationMode, StorageDefaults

logger = logging.getLogger(__name__)

# Global client registry (endpoint key -> client)
_service_clients: Dict[str, TableServiceClient] = {}
_credentials: Dict[str, Any] = {}
_clients_lock = threading.Lock()


def _client_options(storage: StorageDefaults) -> Dict[str, Any]:
    """Transport options shared by every client."""
    return {
        "retry_mode": RetryMode.Fixed,
        "retry_backoff_factor": storage.retry_delay_seconds,
        "retry_total": storage.max_retries,
        "retry_to_secondary": storage.location_mode == LocationMode.PRIMARY_THEN_SECONDARY,
        "location_mode": storage.location_mode.sdk_location,
        "connection_timeout": storage.maximum_execution_seconds,
        "read_timeout": storage.maximum_execution_seconds,
    }


def _get_credential():
    """Async Azure credential for managed identity authentication."""
    client_id = os.environ.get("AZURE_CLIENT_ID")
    if client_id:
        from azure.identity.aio import ManagedIdentityCredential
        logger.debug("ManagedIdentityCredential initialized with client_id")
        return ManagedIdentityCredential(client_id=client_id)

    from azure.identity.aio import DefaultAzureCredential
    logger.debug("DefaultAzureCredential initialized")
    return DefaultAzureCredential()


def _build_service_client(storage: StorageDefaults) -> TableServiceClient:
    """
    Build a TableServiceClient for a storage endpoint.

    Raises:
        ValueError: If neither a connection string nor an account URL is set
    """
    options = _client_options(storage)

    if storage.connection_string:
        logger.info("Creating table service client from connection string")
        return TableServiceClient.from_connection_string(storage.connection_string, **options)

    if storage.account_url:
        logger.info(f"Creating table service client for {storage.account_url} (managed identity)")
        credential = _get_credential()
        _credentials[storage.endpoint_key] = credential
        return TableServiceClient(endpoint=storage.account_url, credential=credential, **options)

    raise ValueError(
        "Table storage not configured. "
        "Set STORAGE_CONNECTION_STRING or STORAGE_ACCOUNT_URL."
    )


def get_table_service(storage: Optional[StorageDefaults] = None) -> TableServiceClient:
    """
    Get the shared service client for a storage endpoint, creating it once.

    Thread-safe with double-checked locking; safe for concurrent first use.
    """
    storage = storage or StorageDefaults.from_env()
    key = storage.endpoint_key

    # Fast path: check without lock
    client = _service_clients.get(key)
    if client is not None:
        return client

    # Slow path: acquire lock for creation
    with _clients_lock:
        client = _service_clients.get(key)
        if client is None:
            client = _build_service_client(storage)
            _service_clients[key] = client
        return client


async def init_table_service(storage: Optional[StorageDefaults] = None) -> TableServiceClient:
    """Eagerly create the shared service client (called at startup)."""
    client = get_table_service(storage)
    logger.info("Table service client initialized")
    return client


async def close_table_service() -> None:
    """Close every shared service client (called at shutdown)."""
    with _clients_lock:
        clients = list(_service_clients.values())
        credentials = list(_credentials.values())
        _service_clients.clear()
        _credentials.clear()

    for client in clients:
        await client.close()
    for credential in credentials:
        await credential.close()

    if clients:
        logger.info(f"Closed {len(clients)} table service client(s)")


__all__ = [
    "get_table_service",
    "init_table_service",
    "close_table_service",
]
