"""Document Store Wiring - builds resolver, ownership and mutator from settings.

Invariants:
    - Domain roots and the identity collection exist after build (created when missing)
    - The bootstrap index is read once here; a missing index aborts startup
    - One DocumentStore per app, stored on app.state (no module globals)
"""

import logging
from dataclasses import dataclass

from app.config import Settings
from app.core.domain_types import Domain
from app.core.errors import BootstrapIndexMissingError
from app.infrastructure.filesystem import FileStore
from app.infrastructure.id_generators import build_id_generator
from app.services.mutate_resource import ResourceMutator
from app.services.ownership import OwnershipResolver
from app.services.resolve_resource import ResourceResolver

logger = logging.getLogger(__name__)


@dataclass
class DocumentStore:
    stores: dict[Domain, FileStore]
    resolver: ResourceResolver
    ownership: OwnershipResolver
    mutator: ResourceMutator

    def missing_roots(self) -> list[Domain]:
        return [
            domain for domain, store in self.stores.items()
            if not store.root.is_dir()
        ]


def build_document_store(settings: Settings) -> DocumentStore:
    stores = {
        Domain.USER: FileStore(settings.user_root, Domain.USER),
        Domain.STATIC: FileStore(settings.static_root, Domain.STATIC),
        Domain.BUSINESS: FileStore(settings.business_root, Domain.BUSINESS),
    }
    for store in stores.values():
        store.ensure_root()
    # identity profiles are created by POST into this collection
    stores[Domain.USER].ensure_directory([settings.identity_collection])

    index_path = settings.static_root / settings.index_document
    try:
        index_document = index_path.read_bytes()
    except (FileNotFoundError, IsADirectoryError) as e:
        raise BootstrapIndexMissingError(str(index_path)) from e

    ownership = OwnershipResolver(
        stores[Domain.USER],
        identity_collection=settings.identity_collection,
        max_depth=settings.ownership_max_depth,
    )
    resolver = ResourceResolver(
        user=stores[Domain.USER],
        static=stores[Domain.STATIC],
        business=stores[Domain.BUSINESS],
        index_document=index_document,
    )
    mutator = ResourceMutator(
        stores[Domain.USER], ownership, build_id_generator(settings.id_strategy),
    )
    logger.info(
        f"Document store ready: {', '.join(repr(s) for s in stores.values())}",
    )
    return DocumentStore(
        stores=stores, resolver=resolver, ownership=ownership, mutator=mutator,
    )
