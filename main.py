"""
CLI entry point for Hydro Search Params.
Pipeline: query -> matching collections -> bbox/dates -> search parameters.
"""
from __future__ import annotations
import json
import logging
import sys

from pipeline.config import load_config
from pipeline.errors import HydroSearchError
from pipeline.main import search


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    query = " ".join(sys.argv[1:]) if len(sys.argv) > 1 else None
    if not query:
        try:
            query = input("Hydro search > ").strip()
        except KeyboardInterrupt:
            return 0

    try:
        config = load_config()
        result = search(query, config)
    except HydroSearchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("\n--- Search parameters ---")
    print(json.dumps(result.to_response(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
