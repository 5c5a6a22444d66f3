"""CLI entrypoint for the crossword and fill-in generator."""

from __future__ import annotations

import argparse
import random
from pathlib import Path
from typing import List

from crossfill.core.constants import Algorithm
from crossfill.core.exceptions import DictionaryLoadError
from crossfill.core.models import WordEntry
from crossfill.data.dictionary import DictionaryIndex
from crossfill.data.wordlist import load_playability, load_wordlist
from crossfill.engine.generator import GeneratorConfig, generate_crossword
from crossfill.fillin.generator import FillinConfig
from crossfill.io.export import write_json
from crossfill.utils.logger import configure_logging, get_logger
from crossfill.utils.pretty import print_crossword_stats


LOGGER = get_logger(__name__)


def parse_entry(text: str) -> WordEntry:
    """``WORD`` or ``WORD:definition``."""
    word, _, definition = text.partition(":")
    return WordEntry(word=word.strip(), definition=definition.strip())


def parse_words_file(path: Path) -> List[WordEntry]:
    """Read entries from a file, one per line. Blank lines and # comments are skipped."""
    entries: List[WordEntry] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(parse_entry(line))
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate classic crosswords from a word list, or fill-in puzzles from a dictionary",
    )
    parser.add_argument(
        "--words",
        nargs="+",
        metavar="WORD",
        help="Explicit words (format: WORD or WORD:Definition)",
    )
    parser.add_argument(
        "--words-file",
        type=Path,
        metavar="FILE",
        help="File with one WORD or WORD:Definition entry per line (# comments and blank lines ignored)",
    )
    parser.add_argument(
        "--wordlist",
        type=Path,
        default=Path("local_db/wordlist.tsv"),
        help="Dictionary word list (TSV or themed JSON)",
    )
    parser.add_argument(
        "--playability",
        type=Path,
        help="Playability scores, one 'SCORE WORD' per line",
    )
    parser.add_argument(
        "--algorithm",
        type=str,
        choices=[a.value for a in Algorithm],
        default=Algorithm.SMART.value,
        help="Generation strategy",
    )
    parser.add_argument("--theme", type=str, help="Pick words tagged with this theme from the word list")
    parser.add_argument(
        "--count",
        type=int,
        default=40,
        help="Number of words drawn from the word list when no words are given",
    )
    parser.add_argument(
        "--fillin-backend",
        type=str,
        choices=["backtracking", "cpsat"],
        default="backtracking",
        help="Solver used by fillin-smart",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        wordlist = load_wordlist(args.wordlist)
        playability = load_playability(args.playability) if args.playability else {}
    except DictionaryLoadError as exc:
        parser.error(str(exc))
    dictionary = DictionaryIndex(wordlist.entries, playability)

    rng = random.Random(args.seed)
    words: List[WordEntry] = []
    if args.words:
        words.extend(parse_entry(text) for text in args.words)
    if args.words_file:
        words.extend(parse_words_file(args.words_file))

    if args.algorithm != Algorithm.FILLIN_SMART.value and not words:
        if args.theme:
            words = wordlist.words_by_theme(args.theme, args.count, rng)
            if not words:
                parser.error(f"no words tagged '{args.theme}' (known themes: {', '.join(wordlist.themes())})")
        else:
            words = wordlist.random_words(rng, min_count=args.count, max_count=args.count)

    config = GeneratorConfig(seed=args.seed, fillin=FillinConfig(backend=args.fillin_backend))

    def report(message: str, percent: float) -> None:
        LOGGER.info("[%3.0f%%] %s", percent, message)

    result = generate_crossword(
        words,
        args.algorithm,
        dictionary=dictionary,
        on_progress=report,
        config=config,
        rng=rng,
    )

    print_crossword_stats(result, seed=args.seed)
    if args.output:
        write_json(result, args.output)


if __name__ == "__main__":  # pragma: no cover
    main()
