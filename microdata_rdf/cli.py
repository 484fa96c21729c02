"""
Command line front end: extract Microdata from files (or stdin) as RDF.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rdflib import Graph

from .config import config
from .data_models import ReaderOptions
from .errors import MicrodataError
from .reader import MicrodataReader, load_registry

logger = logging.getLogger("microdata_rdf")

FORMATS = ["nt", "turtle", "json-ld"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="microdata-rdf",
        description="Extract HTML Microdata as RDF triples",
    )
    parser.add_argument("files", nargs="*", help="HTML files to read (standard input when omitted)")
    parser.add_argument("--base-uri", default=config.BASE_URI, help="Base URI of the documents")
    parser.add_argument("--registry", default=config.REGISTRY, help="Registry JSON file")
    parser.add_argument("--format", choices=FORMATS, default="nt", help="Output serialization")
    parser.add_argument("--parser", default=config.PARSER, help="BeautifulSoup tree builder")
    parser.add_argument("--expand", action="store_true", default=config.VOCAB_EXPANSION,
                        help="Run vocabulary expansion on the extracted triples")
    parser.add_argument("--strict", action="store_true", default=config.STRICT,
                        help="Fail on malformed input instead of recovering")
    parser.add_argument("--output", "-o", help="Write the output to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line tool; returns the exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug(f"Configuration: {config.to_dict()}")

    try:
        registry = load_registry(args.registry)
        graph = Graph()
        sources = args.files or ["-"]
        for source in sources:
            if source == "-":
                logger.info("Reading from standard input")
                markup = sys.stdin.read()
            else:
                logger.info(f"Reading {source}")
                markup = Path(source).read_bytes()

            options = ReaderOptions(
                base_uri=args.base_uri or (Path(source).resolve().as_uri() if source != "-" else ""),
                strict=args.strict,
                vocab_expansion=args.expand,
                parser=args.parser,
            )
            reader = MicrodataReader(markup, options, registry)
            reader.each_triple(graph.add)

        logger.info(f"Extracted {len(graph)} triples from {len(sources)} document(s)")
        output = graph.serialize(format=args.format)
    except (MicrodataError, OSError) as e:
        logger.error(f"Extraction failed: {e}")
        return 1

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
