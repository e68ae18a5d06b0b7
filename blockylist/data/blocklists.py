from datetime import datetime, timezone
import threading
from typing import Any, Dict, List, Optional

from blockylist.config import BLOCKLISTS_FILE
from blockylist.core import BlockListDocument, log_warning, read_json, write_json

# Serializes read-modify-write cycles within one process
_STORE_LOCK = threading.Lock()


def _load_raw() -> Dict[str, Dict[str, Any]]:
    raw = read_json(BLOCKLISTS_FILE, default={})
    if not isinstance(raw, dict):
        return {}
    return {uid: docs for uid, docs in raw.items() if isinstance(docs, dict)}


def _parse_document(blocklist_id: str, payload: Any) -> Optional[BlockListDocument]:
    if not isinstance(payload, dict):
        return None
    payload = dict(payload)
    payload.setdefault("id", blocklist_id)
    try:
        return BlockListDocument.model_validate(payload)
    except Exception as e:
        # Ignore malformed entries instead of failing the whole load.
        log_warning(f"Skipping malformed blocklist {blocklist_id}: {e}")
        return None


def load_blocklists(user_id: str) -> List[BlockListDocument]:
    """
    Load every blocklist stored for `user_id`.

    The on-disk structure is {user_id: {blocklist_id: document}}, most recently
    updated first on return. Malformed documents are skipped.
    """
    docs = _load_raw().get(user_id, {})

    blocklists: List[BlockListDocument] = []
    for blocklist_id, payload in docs.items():
        doc = _parse_document(blocklist_id, payload)
        if doc is not None:
            blocklists.append(doc)

    epoch = datetime.min.replace(tzinfo=timezone.utc)
    blocklists.sort(key=lambda d: _as_utc(d.updated_at) or epoch, reverse=True)
    return blocklists


def get_blocklist(user_id: str, blocklist_id: str) -> Optional[BlockListDocument]:
    payload = _load_raw().get(user_id, {}).get(blocklist_id)
    if payload is None:
        return None
    return _parse_document(blocklist_id, payload)


def save_blocklist(user_id: str, document: BlockListDocument) -> BlockListDocument:
    """
    Insert or replace a blocklist and stamp its timestamps.

    created_at is kept from the stored copy when there is one.
    """
    now = datetime.now(timezone.utc)
    with _STORE_LOCK:
        raw = _load_raw()
        user_docs = raw.setdefault(user_id, {})

        previous = _parse_document(document.id, user_docs.get(document.id))
        created_at = (previous.created_at if previous else None) or document.created_at

        stored = document.model_copy(
            update={"created_at": created_at or now, "updated_at": now}
        )
        user_docs[stored.id] = stored.model_dump(mode="json")
        write_json(BLOCKLISTS_FILE, raw)
    return stored


def delete_blocklist(user_id: str, blocklist_id: str) -> bool:
    with _STORE_LOCK:
        raw = _load_raw()
        user_docs = raw.get(user_id, {})
        if blocklist_id not in user_docs:
            return False
        del user_docs[blocklist_id]
        write_json(BLOCKLISTS_FILE, raw)
    return True


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
