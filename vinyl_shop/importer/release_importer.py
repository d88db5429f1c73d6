"""
Release Importer

Turns a Discogs release into a Shopify product:

    fetch release -> duplicate check -> claim in ledger -> map ->
    create product -> metafields -> complete claim -> collections ->
    image -> result

Once the product exists there is no rollback: a later failure in the
metafield step is raised with the product id in the message, and image
failures are only logged.
"""

import logging
from typing import Optional

from ..common.errors import ConflictError, ValidationError, VinylShopError
from ..common.settings import Settings
from ..discogs.api_client import DiscogsAPIClient
from ..mapping.hooks import ImportHooks
from ..mapping.release_mapper import ReleaseMapper
from ..models import ImportResult, ProductDraft, Release
from ..shopify.product_store import ShopifyProductStore
from .import_ledger import STATUS_CREATED, ImportLedger

logger = logging.getLogger(__name__)


class ReleaseImporter:
    """
    Imports Discogs releases as store products.

    Usage:
        importer = ReleaseImporter(catalog, store, settings, hooks=hooks, ledger=ledger)
        result = importer.import_release(249504)
    """

    def __init__(
        self,
        catalog: DiscogsAPIClient,
        store: ShopifyProductStore,
        settings: Settings,
        hooks: Optional[ImportHooks] = None,
        ledger: Optional[ImportLedger] = None,
        mapper: Optional[ReleaseMapper] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.settings = settings
        self.hooks = hooks or ImportHooks()
        self.ledger = ledger
        self.mapper = mapper or ReleaseMapper(self.hooks)

    def import_release(self, release_id: int) -> ImportResult:
        """Fetch a release from Discogs and create its product."""
        release = self.catalog.get_release(release_id)
        return self.create_product(release)

    def create_product(self, release: Release) -> ImportResult:
        """
        Create the store product for an already fetched release.

        Raises:
            ValidationError: release has no id
            ConflictError: a product for the release already exists
            PersistenceError: the product or its metafields could not be saved
        """
        if release is None or not release.id:
            raise ValidationError("Release data is empty.")
        release_id = release.id

        existing_id = self.store.find_product_by_release_id(release_id)
        if existing_id:
            logger.warning("Release %s already imported as product %s", release_id, existing_id)
            raise ConflictError("Product already exists for this release.")

        if self.ledger is not None:
            # The store is authoritative: a completed record without a product was deleted in Shopify
            if self.ledger.status(release_id) == STATUS_CREATED:
                logger.warning("Product for release %s no longer exists, clearing ledger record", release_id)
                self.ledger.forget(release_id)
            self.ledger.claim(release_id)

        try:
            release = self.hooks.apply_filters("before_create_product", release)
            self.hooks.do_action("before_product_created", release)

            draft = self.mapper.map(release, self.settings.default_product_status)
            product_id = self.store.create_product(draft)
        except Exception:
            if self.ledger is not None:
                self.ledger.release(release_id)
            raise

        self.hooks.do_action("before_meta_added", product_id, release)
        self.store.set_metafields(product_id, draft.metadata)
        self.hooks.do_action("after_meta_added", product_id, release)

        # The store lookup finds the product only once its metafields exist
        if self.ledger is not None:
            self.ledger.complete(release_id, product_id)

        category_ids = self.store.assign_categories(product_id, draft.categories)
        image_attached = self._attach_image(product_id, draft)

        self.hooks.do_action("after_product_created", product_id, release)

        logger.info("Imported release %s as product %s (%d collections, image: %s)",
                    release_id, product_id, len(category_ids), image_attached)
        return ImportResult(
            product_id=product_id,
            release_id=release_id,
            admin_url=self.store.admin_url(product_id),
            image_attached=image_attached,
            category_ids=category_ids,
        )

    def _attach_image(self, product_id: int, draft: ProductDraft) -> bool:
        """Download and attach the product image. Failures are logged only."""
        if not draft.image_url:
            return False

        try:
            content = self.catalog.download_image(draft.image_url)
        except VinylShopError as e:
            logger.warning("Could not download image for product %s: %s", product_id, e.message)
            return False

        return self.store.attach_image(product_id, content, draft.image_url, alt=draft.title) is not None
