from typing import Callable

from loguru import logger

from carebook.config import AppConfig, StoreAdapter
from carebook.store.adapters.fake import FakeStoreClient
from carebook.store.adapters.postgrest import PostgRESTClient
from carebook.store.service import RecordService


def _build_postgrest(config: AppConfig) -> RecordService:
    if not config.store.url or not config.store.anon_key:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    client = PostgRESTClient(
        url=config.store.url,
        anon_key=config.store.anon_key,
        timeout=config.store.timeout,
    )
    return RecordService(client)


def _build_memory(config: AppConfig) -> RecordService:
    return RecordService(FakeStoreClient())


_BUILDERS: dict[StoreAdapter, Callable[[AppConfig], RecordService]] = {
    StoreAdapter.POSTGREST: _build_postgrest,
    StoreAdapter.MEMORY: _build_memory,
}


def build_record_service(config: AppConfig) -> RecordService:
    """Build the record service for the configured store adapter."""
    adapter = config.store.adapter
    logger.info("Building record service with adapter: {}", adapter.value)
    return _BUILDERS[adapter](config)
