"""Index creation for the users collection.

An index left behind by an older deployment (a plain email index, or the
same keys under another name) makes ``create_index`` fail. ``ensure_index``
swaps such an index for the wanted one instead of leaving the collection
without its unique email guarantee.
"""

from logging import getLogger

from pymongo.errors import OperationFailure

logger = getLogger(__name__)

# IndexOptionsConflict, IndexKeySpecsConflict
INDEX_CONFLICT_CODES = {85, 86}


def _is_index_conflict(error: OperationFailure) -> bool:
    return error.code in INDEX_CONFLICT_CODES or "already exists" in str(error)


def _stale_index(existing: dict, keys: dict, name: str, unique: bool) -> str | None:
    """Name of the existing index standing in the way of ``name``, if any."""
    for idx_name, info in existing.items():
        if idx_name == '_id_':
            continue
        same_keys = dict(info.get('key', [])) == keys
        if idx_name == name:
            if not (same_keys and bool(info.get('unique')) == unique):
                return idx_name
        elif same_keys:
            return idx_name
    return None


def ensure_index(collection, keys: list, name: str, unique: bool = False) -> bool:
    """Create index ``name`` on ``keys``, replacing a conflicting one.

    Returns False when creation conflicted but no index to replace was found.
    Any other store error propagates.
    """
    try:
        collection.create_index(keys, name=name, unique=unique)
        return True
    except OperationFailure as e:
        if not _is_index_conflict(e):
            raise

    stale = _stale_index(collection.index_information(), dict(keys), name, unique)
    if stale is None:
        logger.error("Index conflict could not be resolved", extra={"index": name})
        return False

    logger.warning("Replacing index", extra={"dropped": stale, "index": name})
    collection.drop_index(stale)
    collection.create_index(keys, name=name, unique=unique)
    return True
