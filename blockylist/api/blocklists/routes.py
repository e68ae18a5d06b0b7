import random
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blockylist.config import MATERIALIZE_TIMEOUT_SECONDS
from blockylist.core import (
    BlockListDocument,
    CancelToken,
    IncompleteBlocklist,
    MaterializationResult,
    RemoteUnavailable,
    ResolvedBlockResult,
    RunCancelled,
    Unauthorized,
    log_info,
    log_step,
)
from blockylist.data import delete_blocklist, get_blocklist, load_blocklists, save_blocklist
from blockylist.engine import ResolutionContext, materialize_blocklist, resolve_blocks
from blockylist.spotify import SpotifyCredential

from ..deps import get_credential, get_user_id, raise_remote_unavailable, raise_unauth
from .schemas import (
    BlockListPayload,
    BlockResultOut,
    MaterializeRequest,
    MaterializeResponse,
    PreviewResponse,
)

router = APIRouter()


def _get_or_404(user_id: str, blocklist_id: str) -> BlockListDocument:
    doc = get_blocklist(user_id, blocklist_id)
    if doc is None:
        raise HTTPException(status_code=404, detail=f"Blocklist '{blocklist_id}' not found.")
    return doc


def _block_out(r: ResolvedBlockResult) -> BlockResultOut:
    return BlockResultOut(
        block_id=r.block_id,
        block_type=r.block_type,
        ok=r.ok,
        appended=r.appended,
        error_kind=r.error_kind,
        message=r.message,
        uris=list(r.uris),
    )


def _materialize_response(status: str, result: MaterializationResult) -> MaterializeResponse:
    return MaterializeResponse(
        status=status,
        playlist_id=result.playlist_id,
        playlist_url=result.playlist_url,
        populated_blocks=result.populated_count,
        total_blocks=len(result.per_block),
        track_count=result.track_count,
        blocks=[_block_out(r) for r in result.per_block],
    )


@router.get("", response_model=List[BlockListDocument])
def list_blocklists(user_id: str = Depends(get_user_id)) -> List[BlockListDocument]:
    return load_blocklists(user_id)


@router.post("", response_model=BlockListDocument)
def create_blocklist(
    payload: BlockListPayload,
    user_id: str = Depends(get_user_id),
) -> BlockListDocument:
    try:
        doc = BlockListDocument(**payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    saved = save_blocklist(user_id, doc)
    log_info(f"Blocklist {saved.id} created with {len(saved.blocks)} blocks.")
    return saved


@router.get("/{blocklist_id}", response_model=BlockListDocument)
def read_blocklist(blocklist_id: str, user_id: str = Depends(get_user_id)) -> BlockListDocument:
    return _get_or_404(user_id, blocklist_id)


@router.put("/{blocklist_id}", response_model=BlockListDocument)
def update_blocklist(
    blocklist_id: str,
    payload: BlockListPayload,
    user_id: str = Depends(get_user_id),
) -> BlockListDocument:
    existing = _get_or_404(user_id, blocklist_id)
    try:
        doc = BlockListDocument(
            **payload.model_dump(),
            id=existing.id,
            created_at=existing.created_at,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return save_blocklist(user_id, doc)


@router.delete("/{blocklist_id}")
def remove_blocklist(blocklist_id: str, user_id: str = Depends(get_user_id)) -> dict:
    if not delete_blocklist(user_id, blocklist_id):
        raise HTTPException(status_code=404, detail=f"Blocklist '{blocklist_id}' not found.")
    return {"status": "deleted", "id": blocklist_id}


@router.post("/{blocklist_id}/materialize", response_model=MaterializeResponse)
def materialize(
    blocklist_id: str,
    request: MaterializeRequest | None = None,
    credential: SpotifyCredential = Depends(get_credential),
    user_id: str = Depends(get_user_id),
) -> MaterializeResponse:
    """
    Create a new Spotify playlist from a stored blocklist.

    Blocks that fail are reported per block; the call itself only fails when
    the playlist could not be created, the credential was rejected, or the
    run hit its deadline (504, with what was done so far).
    """
    doc = _get_or_404(user_id, blocklist_id)
    request = request or MaterializeRequest()
    rng = random.Random(request.seed) if request.seed is not None else None

    log_step(f"Materializing blocklist {blocklist_id} for user {user_id}...")
    try:
        result = materialize_blocklist(
            credential,
            doc,
            public=request.public,
            rng=rng,
            cancel=CancelToken(timeout=MATERIALIZE_TIMEOUT_SECONDS or None),
        )
    except IncompleteBlocklist as e:
        raise HTTPException(
            status_code=422,
            detail={"status": "incomplete", "message": str(e), "block_ids": e.block_ids},
        )
    except Unauthorized as e:
        if e.partial is None:
            raise_unauth(e)
        raise HTTPException(
            status_code=401,
            detail={
                "status": "unauthenticated",
                "message": str(e),
                "partial": _materialize_response("unauthenticated", e.partial).model_dump(mode="json"),
            },
        )
    except RemoteUnavailable as e:
        raise_remote_unavailable(e)
    except RunCancelled as e:
        detail = {"status": "cancelled", "message": str(e)}
        if e.partial is not None:
            detail["partial"] = _materialize_response("cancelled", e.partial).model_dump(mode="json")
        raise HTTPException(status_code=504, detail=detail)

    return _materialize_response("done", result)


@router.post("/{blocklist_id}/preview", response_model=PreviewResponse)
def preview(
    blocklist_id: str,
    request: MaterializeRequest | None = None,
    credential: SpotifyCredential = Depends(get_credential),
    user_id: str = Depends(get_user_id),
) -> PreviewResponse:
    """Resolve every block without creating or modifying any playlist."""
    doc = _get_or_404(user_id, blocklist_id)
    request = request or MaterializeRequest()
    ctx = ResolutionContext(
        credential=credential,
        rng=random.Random(request.seed) if request.seed is not None else random.SystemRandom(),
        cancel=CancelToken(timeout=MATERIALIZE_TIMEOUT_SECONDS or None),
    )
    try:
        results = resolve_blocks(doc.blocks, ctx)
    except Unauthorized as e:
        raise_unauth(e)
    except RunCancelled as e:
        raise HTTPException(status_code=504, detail={"status": "cancelled", "message": str(e)})

    return PreviewResponse(status="ok", blocks=[_block_out(r) for r in results])
