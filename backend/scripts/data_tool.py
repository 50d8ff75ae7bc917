#!/usr/bin/env python
"""Export, import or seed the persisted repair data record.

Usage:
  python -m scripts.data_tool export --out backups/repair-data.json
  python -m scripts.data_tool import backups/repair-data.json
  python -m scripts.data_tool seed

Options:
  --database-url URL   Override DATABASE_URL (defaults to the .env / environment value)

Exit Codes:
  0 success
  2 import rejected (file left unapplied, error printed to stderr), or seed refused
    because the persisted record could not be loaded
  3 other error
"""
from __future__ import annotations
import argparse, pathlib, sys
from typing import Optional

from repairdesk import STORE_EXTENSION, create_app
from repairdesk.services.seed import seed_demo
from repairdesk.services.store import RepairStore


def build_store(database_url: Optional[str] = None) -> RepairStore:
    overrides = {'SEED_DEMO': False}
    if database_url:
        overrides['DATABASE_URL'] = database_url
    app = create_app(overrides)
    return app.extensions[STORE_EXTENSION]


def main(argv: list[str], store: Optional[RepairStore] = None) -> int:
    p = argparse.ArgumentParser(description="Repair desk data maintenance")
    p.add_argument('--database-url', dest='database_url', help='Database holding the key-value record')
    sub = p.add_subparsers(dest='command', required=True)
    exp = sub.add_parser('export', help='Write all data as pretty-printed JSON')
    exp.add_argument('--out', dest='out', help='Path to write JSON (stdout when omitted)')
    imp = sub.add_parser('import', help='Replace all data from a JSON file')
    imp.add_argument('path', help='Exported JSON file')
    sub.add_parser('seed', help='Write demo data when the store is empty')
    args = p.parse_args(argv)

    try:
        store = store or build_store(args.database_url)
        if args.command == 'export':
            data = store.export_all()
            if args.out:
                out_path = pathlib.Path(args.out)
                out_path.parent.mkdir(parents=True, exist_ok=True)
                out_path.write_text(data + '\n', encoding='utf-8')
                print(f"Wrote {len(store.tickets)} tickets to {out_path}")
            else:
                print(data)
        elif args.command == 'import':
            err = store.import_all(pathlib.Path(args.path).read_text(encoding='utf-8'))
            if err:
                print(f"Import rejected: {err}", file=sys.stderr)
                return 2
            print(f"Imported {len(store.customers)} customers, {len(store.technicians)} technicians, "
                  f"{len(store.devices)} devices, {len(store.tickets)} tickets")
        elif args.command == 'seed':
            if seed_demo(store):
                print("Seeded demo data")
            elif store.has_unreadable_record:
                print("Persisted record could not be loaded; nothing seeded", file=sys.stderr)
                return 2
            else:
                print("Store not empty; nothing seeded")
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 3
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
