"""
flashdeck terminal review loop.

Shows a question, reveals the answer on Enter, then reads a rating and
reports where the card went back into the queue.

Usage:
    python -m flashdeck [--deck vocab] [--config config.yaml] [--data-dir data] [-v]
"""
import argparse
import asyncio
import logging
from typing import Any, Dict, List, Optional

from flashdeck.config import load_config
from flashdeck.errors import FlashdeckError, ValidationError
from flashdeck.flashcards import QueueScheduler, create_scheduler

logger = logging.getLogger(__name__)

RATING_KEYS = {"t": "trivial", "e": "easy", "n": "normal", "m": "medium", "h": "hard"}
QUIT_WORDS = ("q", "quit", "exit")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="flashdeck review session")
    parser.add_argument("--deck", default=None, help="Deck key (default: configured default deck)")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--data-dir", default=None, help="Base directory for deck and state files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def format_meta(meta: Dict[str, Any]) -> str:
    return (
        f"{meta['remaining']} queued | {meta['seen']}/{meta['total']} seen | "
        f"{meta['reviewed']} reviews | {meta['completed']} completed"
    )


async def _prompt(text: str) -> str:
    line = await asyncio.get_running_loop().run_in_executor(None, input, text)
    return line.strip().lower()


async def run_session(scheduler: QueueScheduler) -> None:
    """Review cards until the user quits or the queue is empty."""
    response = await scheduler.get_next_card()
    print(format_meta(response["meta"]))

    while True:
        card = response["card"]
        if card is None:
            print("No cards queued.")
            return

        print(f"\n[{card['id']}] {card['question']}")
        if await _prompt("(enter to reveal, q to quit) ") in QUIT_WORDS:
            return
        print(f"    {card['answer']}")

        while True:
            line = await _prompt("Rate [t]rivial [e]asy [n]ormal [h]ard (q to quit): ")
            if line in QUIT_WORDS:
                return
            try:
                response = await scheduler.rate_card(card["id"], RATING_KEYS.get(line, line))
            except ValidationError as e:
                print(f"  {e}")
                continue
            break

        rated = response["rated"]
        print(f"  -> position {rated['queuePosition']} | {format_meta(response['meta'])}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = load_config(args.config, args.data_dir)
    try:
        scheduler = await create_scheduler(args.deck, config)
    except FlashdeckError as e:
        logger.error(f"Failed to start scheduler: {e}")
        return 1

    try:
        await run_session(scheduler)
    except (EOFError, KeyboardInterrupt):
        print("\nInterrupted")
    except FlashdeckError as e:
        logger.error(f"Review session stopped: {e}")
        return 1
    finally:
        await scheduler.flush()
    return 0


def run() -> None:
    raise SystemExit(asyncio.run(main()))
