"""
Search the card catalog once.

Downloads the current card feed, runs a query against it and prints the
matching card names. Useful for checking query syntax and feed health.

    python -m mtgcards.jobs.search_cards c:r t:instant
    python -m mtgcards.jobs.search_cards --lookup "beck & call"
"""

import argparse
import logging
import sys

from mtgcards.config import settings
from mtgcards.services.card_store import CardStore, CatalogNotReadyError
from mtgcards.services.catalog import Catalog

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 600.0


def run_search(catalog: Catalog, query: str, lookup: bool = False) -> list[str]:
    """
    Run a query or a normalized-name lookup.

    Returns:
        Sorted names of the matching cards.
    """
    if lookup:
        card = catalog.lookup_normalized(query)
        return [card.name] if card else []
    return sorted(card.name for card in catalog.query(query))


def load_catalog(store: CardStore, timeout: float) -> Catalog | None:
    """Start a single refresh and wait for its catalog."""
    store.start()
    try:
        return store.cards(timeout=timeout)
    except CatalogNotReadyError as e:
        logger.error("Card catalog unavailable: %s", e)
        return None
    finally:
        store.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search the Magic card catalog")
    parser.add_argument("query", nargs="+", help="Query terms, e.g. c:wu t:instant")
    parser.add_argument(
        "--lookup",
        action="store_true",
        help="Treat the query as a card name and look it up ignoring case and punctuation",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help="Seconds to wait for the catalog download",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    store = CardStore(settings=settings, refresh_interval=0)
    catalog = load_catalog(store, args.timeout)
    if catalog is None:
        return 1

    names = run_search(catalog, " ".join(args.query), lookup=args.lookup)
    logger.info("%d matching cards", len(names))
    for name in names:
        print(name)
    return 0 if names else 1


if __name__ == "__main__":
    sys.exit(main())
