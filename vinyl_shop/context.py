"""
Service Context

Explicitly constructed container for everything a request needs: settings,
hooks, the Discogs client, the Shopify store, the import ledger and the
importer. The CLI and the admin API each build one and pass it down.
"""

import logging
from typing import Optional

from .common.errors import ConfigurationError
from .common.settings import Settings
from .discogs.api_client import DiscogsAPIClient
from .importer.import_ledger import ImportLedger
from .importer.release_importer import ReleaseImporter
from .mapping.hooks import ImportHooks
from .mapping.status_rules import GenreAutoPublishRule
from .shopify.api_client import ShopifyAPIClient
from .shopify.product_store import ShopifyProductStore

logger = logging.getLogger(__name__)


def default_hooks(settings: Settings) -> ImportHooks:
    """Hooks with the built-in genre auto-publish rule installed."""
    hooks = ImportHooks()
    if settings.auto_publish_genres:
        hooks.add_filter("product_status", GenreAutoPublishRule(settings.auto_publish_genres))
    return hooks


class ServiceContext:
    """
    Wires settings into clients. The Discogs client is built per call so a
    token saved through the settings endpoint takes effect immediately.

    Usage:
        context = ServiceContext(load_settings())
        with context.catalog() as catalog:
            page = catalog.search("Blue Train")
        result = context.importer().import_release(page.results[0].id)
    """

    def __init__(
        self,
        settings: Settings,
        hooks: Optional[ImportHooks] = None,
        store: Optional[ShopifyProductStore] = None,
        ledger: Optional[ImportLedger] = None,
    ):
        self.settings = settings
        self.hooks = hooks if hooks is not None else default_hooks(settings)
        self._store = store
        self._ledger = ledger
        self._shopify_client: Optional[ShopifyAPIClient] = None

    def catalog(self) -> DiscogsAPIClient:
        return DiscogsAPIClient(
            token=self.settings.discogs_token,
            store_url=self.settings.store_url,
            hooks=self.hooks,
        )

    @property
    def store(self) -> ShopifyProductStore:
        if self._store is None:
            if not self.settings.shopify_shop or not self.settings.shopify_access_token:
                raise ConfigurationError(
                    "Shopify is not configured. Set SHOPIFY_SHOP and SHOPIFY_ACCESS_TOKEN."
                )
            self._shopify_client = ShopifyAPIClient(self.settings.shopify_shop, self.settings.shopify_access_token)
            self._store = ShopifyProductStore(self._shopify_client)
        return self._store

    @property
    def ledger(self) -> ImportLedger:
        if self._ledger is None:
            self._ledger = ImportLedger(self.settings.ledger_path)
        return self._ledger

    def importer(self, catalog: Optional[DiscogsAPIClient] = None) -> ReleaseImporter:
        return ReleaseImporter(
            catalog=catalog or self.catalog(),
            store=self.store,
            settings=self.settings,
            hooks=self.hooks,
            ledger=self.ledger,
        )

    def close(self) -> None:
        if self._shopify_client is not None:
            self._shopify_client.close()
