# main.py

import argparse
import asyncio
import sys
from typing import List, Optional

from catalog import DEFAULT_OVERLAYS
from errors import BaseDecodeFailed, ImageRejected
from portrait_pipeline import run_portrait_pipeline
from presentation_shuffler import shuffle


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Blend an overlay onto a square portrait.")
    parser.add_argument("base", nargs="?", help="base image path or URL")
    parser.add_argument("--overlay", help="overlay id")
    parser.add_argument("--upload", action="store_true", help="treat base as a user upload (square check)")
    parser.add_argument("--publish", action="store_true", help="upload the result to Firebase Storage")
    parser.add_argument("--catalog", action="store_true", help="read overlays/base images from Firestore")
    parser.add_argument("--gallery", action="store_true", help="print catalog base images in presentation order and exit")
    parser.add_argument("--out", help="output PNG path")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    overlays = DEFAULT_OVERLAYS
    base_images = []
    if args.catalog or args.gallery:
        from catalog_client import list_base_images, list_overlays

        overlays = list_overlays()
        base_images = list_base_images()

    if args.gallery:
        if not base_images:
            print("[main] No base images in the catalog", file=sys.stderr)
            return 1
        for image in shuffle(base_images):
            print(f"{image.id}\t{image.name}\t{image.image_url}")
        return 0

    if not args.base:
        print("[main] A base image is required", file=sys.stderr)
        return 2

    try:
        result = asyncio.run(
            run_portrait_pipeline(
                args.base,
                args.overlay,
                overlays,
                custom_upload=args.upload,
                publish=args.publish,
                output_path=args.out,
            )
        )
    except ImageRejected as e:
        print(f"[main] {e.user_message} ({e})", file=sys.stderr)
        return 1
    except BaseDecodeFailed as e:
        print(f"[main] Could not load base image: {e}", file=sys.stderr)
        return 1

    print(result["card_url"] or result["card_path"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
