import argparse
import logging
import random
import sys
from typing import List, Optional

from blockylist.config import MATERIALIZE_TIMEOUT_SECONDS, SPOTIFY_ACCESS_TOKEN
from blockylist.core import (
    BlockylistError,
    CancelToken,
    IncompleteBlocklist,
    RunCancelled,
    Unauthorized,
    configure_logging,
    log_error,
    log_info,
    log_section,
    log_step,
    log_success,
    log_warning,
)
from blockylist.data import get_blocklist, load_blocklists
from blockylist.engine import materialize_blocklist
from blockylist.spotify import SpotifyCredential, get_current_user_id


def _credential() -> SpotifyCredential:
    if not SPOTIFY_ACCESS_TOKEN:
        raise Unauthorized("Please set SPOTIFY_ACCESS_TOKEN in the .env file.")
    return SpotifyCredential(access_token=SPOTIFY_ACCESS_TOKEN)


def _resolve_user_id(credential: SpotifyCredential, user_id: Optional[str]) -> str:
    if user_id:
        return user_id
    log_step("Fetching current Spotify user...")
    return get_current_user_id(credential)


def cmd_list(args: argparse.Namespace) -> int:
    credential = _credential()
    user_id = _resolve_user_id(credential, args.user_id)

    log_section(f"Blocklists of {user_id}")
    blocklists = load_blocklists(user_id)
    if not blocklists:
        log_info("No blocklists stored yet.")
        return 0

    for doc in blocklists:
        incomplete = len(doc.incomplete_blocks())
        suffix = f", {incomplete} incomplete" if incomplete else ""
        log_info(f"{doc.id}  {doc.name} ({len(doc.blocks)} blocks{suffix})")
    return 0


def cmd_materialize(args: argparse.Namespace) -> int:
    credential = _credential()
    user_id = _resolve_user_id(credential, args.user_id)

    doc = get_blocklist(user_id, args.blocklist_id)
    if doc is None:
        log_error(f"Blocklist '{args.blocklist_id}' not found for user {user_id}.")
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        result = materialize_blocklist(
            credential,
            doc,
            public=not args.private,
            rng=rng,
            cancel=CancelToken(timeout=MATERIALIZE_TIMEOUT_SECONDS or None),
        )
    except IncompleteBlocklist as e:
        log_error(f"{e}. Pick an episode, show or source for them first.")
        return 1
    except RunCancelled as e:
        if e.partial is not None:
            log_warning(f"Partial playlist: {e.partial.playlist_url or e.partial.playlist_id}")
        log_error(str(e))
        return 1
    except Unauthorized as e:
        if e.partial is not None:
            log_warning(f"Partial playlist: {e.partial.playlist_url or e.partial.playlist_id}")
        raise

    for block_result in result.failed_blocks:
        log_warning(
            f"Block {block_result.block_id} skipped "
            f"({block_result.error_kind.value if block_result.error_kind else 'unknown'})."
        )
    log_success(f"Playlist ready: {result.playlist_url or result.playlist_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockylist",
        description="Materialize stored blocklists into Spotify playlists.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List stored blocklists.")
    p_list.add_argument("--user-id", default=None, help="Store key; defaults to the token's user.")
    p_list.set_defaults(func=cmd_list)

    p_mat = sub.add_parser("materialize", help="Create a playlist from a blocklist.")
    p_mat.add_argument("blocklist_id")
    p_mat.add_argument("--user-id", default=None, help="Store key; defaults to the token's user.")
    p_mat.add_argument("--seed", type=int, default=None, help="Seed for reproducible picks.")
    p_mat.add_argument("--private", action="store_true", help="Create a private playlist.")
    p_mat.set_defaults(func=cmd_materialize)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return args.func(args)
    except Unauthorized as e:
        log_error(f"Spotify authorization failed: {e}")
        return 2
    except BlockylistError as e:
        log_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
