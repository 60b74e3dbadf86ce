#!/usr/bin/env python3
"""
Results Viewer

Terminal front-end for the SiteCraft results client.

Usage:
    # Configure the backend (or put these in .env):
    export SITECRAFT_API_URL=https://api.example.com
    export SESSION_STORE=file

    # Scan a site (clears the cached result first):
    python scripts/view_results.py scan https://example.com

    # Poll an analysis until it finishes and print it:
    python scripts/view_results.py results 3f2a9c

    # Work with the cached report:
    python scripts/view_results.py cached
    python scripts/view_results.py upgrade
    python scripts/view_results.py download ./reports
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def print_notice(notice):
    print(f"[{notice.level.value}] {notice.message}")


def print_session(session) -> int:
    from sitecraft.reporter import render_analysis, render_tier_view
    from sitecraft.results import ResultsStatus

    if session.status == ResultsStatus.NOT_FOUND:
        print(session.message)
        return 1

    if session.status == ResultsStatus.FAILED:
        print(session.message)
        if session.analysis is not None:
            print(render_analysis(session.analysis))
        return 2

    if session.report is not None:
        print(render_tier_view(session.view))
    elif session.analysis is not None:
        print(render_analysis(session.analysis))
    return 0


async def run(args) -> int:
    load_dotenv()

    from sitecraft.client import SiteCraftClient
    from sitecraft.persistence import create_session_store
    from sitecraft.polling import PollConfig
    from sitecraft.reporter import Notifier
    from sitecraft.results import ResultsSession
    from sitecraft.utils import get_settings

    settings = get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    store = create_session_store(settings)
    notifier = Notifier(sink=print_notice)
    access_token = args.token or os.getenv("SITECRAFT_ACCESS_TOKEN")

    try:
        async with SiteCraftClient.from_settings(settings, access_token=access_token) as client:
            async with ResultsSession(
                client,
                store,
                notifier=notifier,
                poll_config=PollConfig.from_settings(settings),
                language=args.language or settings.LANGUAGE,
            ) as session:
                if args.command == "scan":
                    await session.start_new_scan(args.url, report_type=args.report_type)
                    return print_session(session)

                if args.command == "results":
                    await session.open(args.analysis_id)
                    return print_session(session)

                await session.open()
                if args.command == "cached":
                    return print_session(session)

                if session.result is None:
                    print("No cached result. Run a scan first.")
                    return 1

                if args.command == "upgrade":
                    await session.upgrade()
                    return print_session(session)

                if args.command == "download":
                    path = await session.download(args.destination)
                    return 0 if path else 1
    finally:
        await store.close()

    return 1


def main():
    parser = argparse.ArgumentParser(description="View SiteCraft audit results")
    parser.add_argument("--token", help="Access token (defaults to SITECRAFT_ACCESS_TOKEN)")
    parser.add_argument("--language", help="Report language (defaults to LANGUAGE)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Start a new scan")
    scan.add_argument("url")
    scan.add_argument("--report-type", choices=["overview", "detailed"], default="overview")

    results = subparsers.add_parser("results", help="Poll an analysis and print it")
    results.add_argument("analysis_id")

    subparsers.add_parser("cached", help="Print the cached result")
    subparsers.add_parser("upgrade", help="Upgrade the cached report to detailed")

    download = subparsers.add_parser("download", help="Download the cached report as PDF")
    download.add_argument("destination", nargs="?", default=".")

    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
