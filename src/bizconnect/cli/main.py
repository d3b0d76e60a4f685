"""
BizConnect CLI
Command-line interface for quick sale administration and bidding
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from ..config import settings, setup_logging
from . import commands


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='bizconnect', description='KTU BizConnect quick sales')
    parser.add_argument('--api', default=settings.API_BASE_URL, help='API base URL')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('init-db', help='Create database tables')

    admin = sub.add_parser('create-admin', help='Create an admin account')
    admin.add_argument('username')
    admin.add_argument('--password')
    admin.add_argument('--full-name')
    admin.add_argument('--email')

    watch = sub.add_parser('watch', help='Live countdown for a sale')
    watch.add_argument('sale_id')

    bid = sub.add_parser('bid', help='Place a bid')
    bid.add_argument('sale_id')
    bid.add_argument('--name', required=True, help='Bidder name')
    bid.add_argument('--amount', required=True, help='Bid amount, e.g. 60.00')
    bid.add_argument('--contact', required=True, help='Contact number')

    final = sub.add_parser('finalize', help='Finalize a sale (admin)')
    final.add_argument('sale_id')
    final.add_argument('--username', required=True)
    final.add_argument('--password')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level='WARNING')

    if args.command == 'init-db':
        ok = commands.init_db()
    elif args.command == 'create-admin':
        ok = commands.create_admin(args.username, args.password, args.full_name, args.email)
    elif args.command == 'watch':
        ok = asyncio.run(commands.watch_sale(args.sale_id, args.api)) is not None
    elif args.command == 'bid':
        ok = asyncio.run(commands.bid(args.sale_id, args.name, args.amount, args.contact, args.api))
    else:
        ok = asyncio.run(commands.finalize(args.sale_id, args.username, args.password, args.api))

    return 0 if ok else 1


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
