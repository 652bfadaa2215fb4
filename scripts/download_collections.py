"""
Refresh the bundled collection catalog from the Hydroweb.next STAC API.
Writes data/collections.json (the text embedded in the matching prompt)
and, with --thumbnails, saves collection thumbnails to data/collections/.

Usage: python scripts/download_collections.py [--thumbnails] [--stac-url URL]
"""
import argparse
import json
import sys
from pathlib import Path

import requests

# Paths
REPO_ROOT = Path(__file__).resolve().parent.parent
CATALOG_FILE = REPO_ROOT / "data" / "collections.json"
THUMBNAIL_DIR = REPO_ROOT / "data" / "collections"

STAC_BASE_URL = "https://hydroweb-pp.next.theia-land.fr/api/v1/rs-catalog/stac"
TIMEOUT = 30
THUMBNAIL_RELS = ("preview", "thumbnail", "icon")


def fetch_json(session, url: str) -> dict:
    response = session.get(url, timeout=TIMEOUT)
    response.raise_for_status()
    return response.json()


def find_thumbnail_url(collection: dict):
    """Thumbnail asset first, then a preview/thumbnail/icon link."""
    thumbnail = (collection.get("assets") or {}).get("thumbnail")
    if thumbnail and thumbnail.get("href"):
        return thumbnail["href"]
    for link in collection.get("links") or []:
        if link.get("rel") in THUMBNAIL_RELS:
            return link.get("href")
    return None


def download_thumbnail(session, collection_id: str, url: str) -> Path:
    extension = url.split(".")[-1].split("?")[0]
    path = THUMBNAIL_DIR / f"{collection_id}.{extension}"
    response = session.get(url, timeout=TIMEOUT)
    response.raise_for_status()
    path.write_bytes(response.content)
    return path


def build_entry(collection: dict) -> dict:
    description = collection.get("description") or ""
    short = description[:200] + ("..." if len(description) > 200 else "")
    return {
        "id": collection["id"],
        "title": collection.get("title") or collection["id"],
        "description": description,
        "shortDescription": short,
        "thumbnailUrl": find_thumbnail_url(collection),
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Download STAC collection metadata")
    parser.add_argument("--stac-url", default=STAC_BASE_URL)
    parser.add_argument("--thumbnails", action="store_true", help="Also download thumbnails")
    args = parser.parse_args()

    session = requests.Session()
    print("Fetching collections from STAC API...")
    try:
        listing = fetch_json(session, f"{args.stac_url}/collections")
    except requests.RequestException as exc:
        print(f"Error fetching collections: {exc}", file=sys.stderr)
        return 1

    collections = listing.get("collections") or []
    print(f"Found {len(collections)} collections")

    entries = []
    for summary in collections:
        collection_id = summary["id"]
        print(f"\nProcessing collection: {collection_id}")
        try:
            detailed = fetch_json(session, f"{args.stac_url}/collections/{collection_id}")
        except requests.RequestException as exc:
            print(f"  Skipping {collection_id} - could not fetch details: {exc}")
            continue

        entry = build_entry(detailed)
        if args.thumbnails and entry["thumbnailUrl"]:
            THUMBNAIL_DIR.mkdir(parents=True, exist_ok=True)
            try:
                path = download_thumbnail(session, collection_id, entry["thumbnailUrl"])
                print(f"  Thumbnail saved: {path.name}")
            except requests.RequestException as exc:
                print(f"  Failed to download thumbnail: {exc}")
        entries.append(entry)

    CATALOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CATALOG_FILE.write_text(json.dumps(entries, indent=2) + "\n", encoding="utf-8")
    print(f"\nCatalog saved to {CATALOG_FILE} ({len(entries)} collections)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
