import sys
import asyncio
import argparse
from typing import List, Optional, Sequence

# --- Settings/Logging ---
from o2cm_couples.logging.setup import setup_logging
from o2cm_couples.config.settings import settings

setup_logging()

from loguru import logger

# --- End Settings/Logging ---

import httpx
from rich.console import Console
from rich.prompt import Prompt

from o2cm_couples.models.partnership import PartnershipObservation
from o2cm_couples.normalization.normalizer import GroupedEvents, Normalizer
from o2cm_couples.parsing.competitor_parser import DiscoveryError, extract_partnerships
from o2cm_couples.reporting.formatter import iter_report_sections, render_plain
from o2cm_couples.scrapers.base_scraper import BaseScraper, ScraperError
from o2cm_couples.scrapers.entries_scraper import EntriesScraper
from o2cm_couples.storage.report_writer import (
    PersistenceError,
    save_raw_response,
    save_report,
)


async def fetch_competitor_data(
    scraper: BaseScraper, event_key: str, competitor_id: str
) -> List[PartnershipObservation]:
    """Fetches and parses one competitor; a failed fetch contributes nothing."""
    try:
        html = await scraper.fetch_competitor_page(event_key, competitor_id)
    except (ScraperError, httpx.HTTPError) as e:
        logger.error(f"Error fetching data for competitor ID {competitor_id}: {e}")
        return []

    if settings.save_raw_responses:
        try:
            save_raw_response(html, settings.raw_response_dir, event_key, competitor_id)
        except PersistenceError as e:
            logger.error(str(e))

    return extract_partnerships(html)


async def collect_observations(
    scraper: BaseScraper,
    event_key: str,
    competitor_ids: Sequence[str],
    delay: Optional[float] = None,
) -> List[PartnershipObservation]:
    """Scrapes every competitor one at a time, pausing between requests."""
    delay = settings.request_delay_seconds if delay is None else delay
    all_entries: List[PartnershipObservation] = []

    # Sequential on purpose, to avoid overwhelming the server
    for competitor_id in competitor_ids:
        entries = await fetch_competitor_data(scraper, event_key, competitor_id)
        all_entries.extend(entries)
        await asyncio.sleep(delay)

    logger.info(
        f"Collected {len(all_entries)} partnership observations from {len(competitor_ids)} competitors."
    )
    return all_entries


def output_report(
    grouped: GroupedEvents, output_file: str, console: Optional[Console] = None
) -> str:
    """Prints each event section as it is built, then saves the plain report."""
    console = console or Console()
    plain_parts = []
    for section in iter_report_sections(grouped):
        plain_parts.append(render_plain(section))
        console.print(section, end="", soft_wrap=True)

    plain_text = "".join(plain_parts)
    try:
        saved_path = save_report(plain_text, output_file)
        console.print(
            f"\nOutput has been saved to {saved_path}", style="green", markup=False
        )
    except PersistenceError as e:
        logger.error(str(e))
        console.print(f"\n{e}", style="red", markup=False)
    return plain_text


async def run(
    event_key: str,
    scraper: Optional[BaseScraper] = None,
    output_file: Optional[str] = None,
    console: Optional[Console] = None,
    delay: Optional[float] = None,
) -> Optional[GroupedEvents]:
    """Scrapes one competition and writes its couples-by-event report.

    Returns the grouped events, or None when the competition could not be
    scraped at all.
    """
    event_key = event_key.strip()
    if not event_key:
        logger.info("No event ID entered. Exiting.")
        return None

    scraper = scraper or EntriesScraper()
    try:
        try:
            competitor_ids = await scraper.fetch_competitor_ids(event_key)
        except (DiscoveryError, ScraperError, httpx.HTTPError) as e:
            logger.error(f"Error fetching competitor IDs for event {event_key}: {e}")
            return None

        all_entries = await collect_observations(
            scraper, event_key, competitor_ids, delay=delay
        )
    finally:
        await scraper.close()

    normalizer = Normalizer(merge_events=settings.merge_partner_events)
    grouped = normalizer.normalize(all_entries)
    if not grouped:
        logger.warning(f"No events with registered couples found for {event_key}.")

    output_report(grouped, output_file or settings.output_file, console=console)
    logger.success(f"Report complete: {len(grouped)} events.")
    return grouped


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List the couples entered in each event of an O2CM competition."
    )
    parser.add_argument(
        "event", nargs="?", help="O2CM event ID (e.g. CCC). Prompted for when omitted."
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help=f"Report file (default: {settings.output_file}).",
    )
    return parser.parse_args(argv)


async def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the application."""
    args = parse_args(argv)
    event_key = args.event
    if event_key is None:
        event_key = Prompt.ask(
            "Enter the o2cm event ID (e.g CCC)", default="", show_default=False
        )
    await run(event_key, output_file=args.output)


def cli() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
