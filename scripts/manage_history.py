import argparse
import asyncio
import logging

from link_extractor.config import get_settings
from link_extractor.schemas import LinkRecord
from link_extractor.services.errors import RemoteError
from link_extractor.services.record_store import build_http_client, extract_record_id
from link_extractor.services.workspace import build_workspace


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse and prune the link extraction history")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List all records, newest first")
    search = commands.add_parser("search", help="Case-insensitive search over record fields")
    search.add_argument("query")
    delete = commands.add_parser("delete", help="Delete one record")
    delete.add_argument("record", help="Record id or record URL")
    return parser.parse_args()


def _print_record(record: LinkRecord) -> None:
    print(f"{record.record_id}\t{record.created_at}\t{record.fields.input_url or '-'}\t{record.fields.extracted_url or '-'}")


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    async with build_http_client(settings) as http:
        workspace = build_workspace(settings, http)
        try:
            if args.command == "delete":
                record_id = extract_record_id(args.record) or args.record
                await workspace.store.delete(record_id)
                print(f"Deleted {record_id}")
                return 0
            await workspace.history.refresh()
        except RemoteError as exc:
            print(f"Record store error: {exc.message}")
            return 1
    query = args.query if args.command == "search" else ""
    records = workspace.history.search(query)
    if not records:
        print("No results found" if query else "No records yet")
    for record in records:
        _print_record(record)
    return 0


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=get_settings().log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
