# snapintent/cli.py
"""
Command line entry point.

Usage
-----
    snapintent process path/to/screenshot.png
    snapintent search "tropical beach" --limit 5
    snapintent places | clusters | region
    snapintent show <screenshot-id>
    snapintent enrich <screenshot-id>
    snapintent geocode <screenshot-id>

Global flags: --env-file, --store-dir, --offline (mock vision, hash embeddings, static
geocoder, no web search). Output is JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from snapintent.config.settings import AppConfig, load_config
from snapintent.core.errors import EmbeddingFailure, ExtractionFailure, SnapIntentError
from snapintent.core.logging_setup import configure_logging
from snapintent.orchestrators import build_pipeline, enrich_screenshot
from snapintent.storage import get_store
from snapintent.tools.web_search import get_web_search

logger = logging.getLogger(__name__)

_MEDIA_BY_SUFFIX = {".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png", ".gif": "image/gif", ".webp": "image/webp"}


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _media_type_for(path: Path, override: str | None) -> str:
    if override:
        return override
    mt = _MEDIA_BY_SUFFIX.get(path.suffix.lower())
    if mt is None:
        raise argparse.ArgumentTypeError(f"cannot infer media type from {path.name!r}; pass --media-type")
    return mt


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="snapintent", description="Screenshot intent extraction and place clustering")
    p.add_argument("--env-file", type=str, default=None, help="Optional .env file")
    p.add_argument("--store-dir", type=str, default=None, help="Override SNAPINTENT_STORE_DIR")
    p.add_argument("--offline", action="store_true", help="Use deterministic local providers only")
    sub = p.add_subparsers(dest="command", required=True)

    proc = sub.add_parser("process", help="Process one screenshot")
    proc.add_argument("image", type=str)
    proc.add_argument("--media-type", type=str, default=None)

    srch = sub.add_parser("search", help="Semantic search over stored screenshots")
    srch.add_argument("query", type=str)
    srch.add_argument("--limit", type=int, default=10)

    sub.add_parser("places", help="List stored places")
    sub.add_parser("clusters", help="List stored clusters")
    sub.add_parser("region", help="Map region fitting all places")

    for name, help_text in (
        ("show", "Show one stored screenshot (without image payloads)"),
        ("enrich", "Attach web search results to a screenshot"),
        ("geocode", "Geocode-then-cluster the places of a screenshot"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("screenshot_id", type=str)

    return p


def _config_from(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(env_file=args.env_file)
    if args.store_dir:
        cfg = cfg.model_copy(update={"storage": cfg.storage.model_copy(update={"directory": Path(args.store_dir)})})
    return cfg.offline() if args.offline else cfg


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = _config_from(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2
    configure_logging(cfg)
    logger.debug("command=%s offline=%s store=%s", args.command, args.offline, cfg.storage.directory)

    store = get_store(cfg.storage)
    try:
        pipeline = build_pipeline(cfg, store=store)
    except RuntimeError as e:
        print(f"setup error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "process":
            path = Path(args.image)
            if not path.is_file():
                print(f"image not found: {path}", file=sys.stderr)
                return 2
            try:
                media_type = _media_type_for(path, args.media_type)
            except argparse.ArgumentTypeError as e:
                print(str(e), file=sys.stderr)
                return 2
            result = pipeline.process(path.read_bytes(), media_type, filename=path.name)
            _emit(result.to_document())
        elif args.command == "search":
            _emit([h.to_document() for h in pipeline.search(args.query, limit=args.limit)])
        elif args.command == "places":
            _emit([p.to_document() for p in pipeline.list_places()])
        elif args.command == "clusters":
            _emit([c.to_document() for c in pipeline.list_clusters()])
        elif args.command == "region":
            region = pipeline.map_region()
            _emit(region.to_document() if region else None)
        elif args.command == "show":
            rec = pipeline.get_screenshot(args.screenshot_id)
            if rec is None:
                print(f"unknown screenshot {args.screenshot_id}", file=sys.stderr)
                return 1
            doc = rec.to_document()
            doc.pop("imageBase64", None)
            doc.pop("thumbnailBase64", None)
            _emit(doc)
        elif args.command == "enrich":
            provider = get_web_search(cfg.web_search)
            if provider is None:
                print("web search is not configured (TAVILY_API_KEY)", file=sys.stderr)
                return 2
            _emit(enrich_screenshot(store, provider, args.screenshot_id).to_document())
        elif args.command == "geocode":
            res = pipeline.geocode_and_cluster(args.screenshot_id)
            _emit(
                {
                    "places": [p.to_document() for p in res.places],
                    "clusters": [c.to_document() for c in res.clusters],
                }
            )
    except ExtractionFailure as e:
        print(f"extraction failed: {e}", file=sys.stderr)
        return 1
    except EmbeddingFailure as e:
        print(f"embedding failed: {e}", file=sys.stderr)
        return 1
    except (SnapIntentError, LookupError, RuntimeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
