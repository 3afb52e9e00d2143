import argparse
import asyncio
import json
import logging

from link_extractor.config import get_settings
from link_extractor.services.errors import ExtractionError, RemoteError
from link_extractor.services.record_store import build_http_client
from link_extractor.services.workspace import build_workspace


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract the clean destination of a tracking or redirect URL")
    parser.add_argument("url", help="URL to clean")
    return parser.parse_args()


async def run(url: str) -> int:
    settings = get_settings()
    async with build_http_client(settings) as http:
        workspace = build_workspace(settings, http)
        try:
            record = await workspace.orchestrator.extract(url)
        except (ExtractionError, RemoteError) as exc:
            print(f"Extraction failed: {exc}")
            return 1
    if record is None:
        print("Nothing to extract")
        return 1
    print(json.dumps(record.model_dump(), indent=2, sort_keys=True))
    return 0


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=get_settings().log_level)
    return asyncio.run(run(args.url))


if __name__ == "__main__":
    raise SystemExit(main())
