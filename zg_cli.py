#!/usr/bin/env python3
"""
Zero Gravity - Command Line Tool

Generate, parse and embed Zero Gravity stamps and full records.

QUICK START:
    # Generate a full record from an article
    python zg_cli.py generate --input article.md

    # Also embed it and print a stamp for the article
    python zg_cli.py generate --input article.md --embed --stamp

    # Parse the stamp embedded in a document
    python zg_cli.py parse --input post-with-stamp.md --json

    # Add an embedding to an existing record
    python zg_cli.py embed --input data/my-article.zg.json --output out.zg.json

REQUIREMENTS:
    - Anthropic API key for `generate`
    - OpenAI API key for `embed` and `generate --embed`
"""

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from zerogravity.config import ZeroGravityConfig
from zerogravity.embedder import create_openai_client, embed
from zerogravity.formatter import format_stamp_with_header, stamp_fields_from_record
from zerogravity.generator import StampGenerator
from zerogravity.logging_setup import configure_logging, LogCategory, log_file_operation, log_validation
from zerogravity.record import build_full_json, strip_envelope
from zerogravity.stamp_parser import parse_zg
from zerogravity.validation import ID_PATTERN, validate_full_json


def emit(message: str = ""):
    """Print human-readable output to stderr, keeping stdout for data."""
    print(message, file=sys.stderr)


class ZeroGravityRunner:
    """
    Runs the CLI commands.

    Handles:
    - Reading documents and writing records
    - Generation and embedding through the API clients
    - Reporting validation results
    """

    def __init__(self, config: Optional[ZeroGravityConfig] = None, log_level: str = "INFO"):
        self.logger = configure_logging(log_level=log_level, console=True)
        self.config = config or ZeroGravityConfig()

    # -------------------------------------------------------------------------
    # File helpers
    # -------------------------------------------------------------------------

    def read_input(self, input_path: Optional[str]) -> Optional[str]:
        """Read an input document, logging why it could not be read."""
        if not input_path:
            self.logger.error(f"{LogCategory.ERROR} --input <path> is required")
            return None

        resolved = Path(input_path).resolve()
        if not resolved.is_file():
            log_file_operation("Read", resolved, success=False, details="file not found")
            self.logger.error(f"{LogCategory.ERROR} File not found: {resolved}")
            return None

        log_file_operation("Read", resolved)
        return resolved.read_text(encoding="utf-8")

    def write_output(self, output_path: Path, content: str):
        """Write content to a file, creating parent directories."""
        resolved = Path(output_path).resolve()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        resolved.write_text(content, encoding="utf-8")
        log_file_operation("Write", resolved)
        emit(f"Written to: {resolved}")

    def default_record_path(self, fields: Dict[str, Any]) -> Path:
        record_id = fields.get("id")
        if not isinstance(record_id, str) or not ID_PATTERN.fullmatch(record_id):
            record_id = "output"
        return self.config.data_dir / f"{record_id}.zg.json"

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def get_generator(self) -> Optional[StampGenerator]:
        api_key = self.config.get_anthropic_api_key()
        if not api_key:
            self.logger.error(
                f"{LogCategory.CONFIG} No Anthropic API key found. "
                "Set ZEROGRAVITY_API_KEY or ANTHROPIC_API_KEY in .env"
            )
            return None
        return StampGenerator(
            api_key=api_key,
            model=self.config.generation_model,
            max_tokens=self.config.max_tokens,
        )

    def get_openai_client(self):
        api_key = self.config.get_openai_api_key()
        if not api_key:
            self.logger.error(f"{LogCategory.CONFIG} No OpenAI API key found. Set OPENAI_API_KEY in .env")
            return None
        return create_openai_client(api_key)

    def embed_fields(self, client, fields: Dict[str, Any]):
        descriptor = embed(
            client,
            fields,
            model=self.config.embedding_model,
            dimensions=self.config.embedding_dimensions,
        )
        self.logger.info(
            f"{LogCategory.EMBEDDING} Embedding: {descriptor.dimensions} dimensions, model: {descriptor.model}"
        )
        return descriptor

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def generate(self, input_path: str, output_path: Optional[str] = None,
                 with_embedding: bool = False, with_stamp: bool = False) -> bool:
        """Generate a full record from an article."""
        text = self.read_input(input_path)
        if text is None:
            return False

        generator = self.get_generator()
        if generator is None:
            return False

        self.logger.info(f"{LogCategory.GENERATION} Generating Zero Gravity fields...")
        result = generator.generate(text)

        if result.fields is None:
            self.logger.error(f"{LogCategory.ERROR} Failed to generate valid fields")
            emit("Raw output:")
            emit(result.raw)
            return False

        validation = validate_full_json(result.fields)
        log_validation("generated fields", validation.valid, "; ".join(validation.errors))
        if validation.valid:
            emit("Fields are valid")
        else:
            emit("Validation warnings:")
            for err in validation.errors:
                emit(f"  - {err}")

        descriptor = None
        if with_embedding:
            client = self.get_openai_client()
            if client is None:
                return False
            descriptor = self.embed_fields(client, result.fields)

        record = build_full_json(result.fields, embedding=descriptor)
        target = Path(output_path) if output_path else self.default_record_path(result.fields)
        self.write_output(target, json.dumps(record, indent=2, ensure_ascii=False))

        if with_stamp:
            stamp = format_stamp_with_header(
                stamp_fields_from_record(result.fields, version=self.config.stamp_version),
                info_url=self.config.info_url,
            )
            emit("\nStamp:\n")
            print(stamp)

        return True

    def parse(self, input_path: str, as_json: bool = False) -> bool:
        """Parse the stamp in a document and report it."""
        text = self.read_input(input_path)
        if text is None:
            return False

        stamp = parse_zg(text)
        if stamp is None:
            self.logger.error(f"{LogCategory.PARSER} No Zero Gravity stamp found in input")
            return False

        log_validation("stamp", stamp.validation.valid, "; ".join(stamp.validation.errors))

        if as_json:
            print(json.dumps(stamp.to_dict(), indent=2, ensure_ascii=False))
            return True

        emit(f"Zero Gravity v{stamp.version} stamp found\n")
        for key, value in stamp.fields.items():
            if isinstance(value, list):
                emit(f"  {key}: [{len(value)} items]")
                for item in value:
                    emit(f"    - {item}")
            else:
                emit(f"  {key}: {value}")

        emit()
        if stamp.validation.valid:
            emit("  Status: VALID")
        else:
            emit("  Status: INVALID")
            for err in stamp.validation.errors:
                emit(f"    - {err}")

        return True

    def embed(self, input_path: str, output_path: Optional[str] = None) -> bool:
        """Add an embedding to a full record, or to the fields of a stamp."""
        text = self.read_input(input_path)
        if text is None:
            return False

        fields = self.load_embedding_fields(text)
        if fields is None:
            return False

        client = self.get_openai_client()
        if client is None:
            return False

        descriptor = self.embed_fields(client, fields)
        record_json = json.dumps(build_full_json(fields, embedding=descriptor), indent=2, ensure_ascii=False)

        if output_path:
            self.write_output(Path(output_path), record_json)
        else:
            print(record_json)
        return True

    def load_embedding_fields(self, text: str) -> Optional[Dict[str, Any]]:
        """Read record fields from JSON, or from the stamp in a document."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None

        if isinstance(data, dict):
            return strip_envelope(data)

        stamp = parse_zg(text)
        if stamp is None:
            self.logger.error(f"{LogCategory.PARSER} No Zero Gravity stamp or JSON found in input")
            return None

        self.logger.warning(
            f"{LogCategory.EMBEDDING} Stamp has limited fields. "
            "For best embeddings, use the full .zg.json file as input."
        )
        return {
            key: stamp.fields[key]
            for key in ("title", "intent")
            if stamp.fields.get(key) is not None
        }


# =============================================================================
# CLI Interface
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Zero Gravity - semantic stamps for documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python zg_cli.py generate --input article.md --embed --stamp
  python zg_cli.py parse --input file-with-stamp.md --json
  python zg_cli.py embed --input full.zg.json --output full-with-embedding.zg.json

API Key Sources (in priority order):
  1. ZEROGRAVITY_API_KEY / ANTHROPIC_API_KEY / OPENAI_API_KEY environment variables
  2. .env file in the project directory
  3. ~/.anthropic/api_key file (Anthropic only)
        """
    )
    parser.add_argument("--config", type=str, metavar="PATH", help="Path to config.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command")

    gen = subparsers.add_parser("generate", help="Generate Zero Gravity fields from an article")
    gen.add_argument("--input", "-i", type=str, metavar="FILE", help="Article to distill")
    gen.add_argument("--output", "-o", type=str, metavar="FILE", help="Where to write the .zg.json record")
    gen.add_argument("--embed", action="store_true", help="Also generate an embedding")
    gen.add_argument("--stamp", action="store_true", help="Also print a stamp")

    prs = subparsers.add_parser("parse", help="Parse a Zero Gravity stamp from a document")
    prs.add_argument("--input", "-i", type=str, metavar="FILE", help="Document containing a stamp")
    prs.add_argument("--json", action="store_true", help="Output as JSON")

    emb = subparsers.add_parser("embed", help="Add an embedding to a .zg.json file")
    emb.add_argument("--input", "-i", type=str, metavar="FILE", help="Full record or document with a stamp")
    emb.add_argument("--output", "-o", type=str, metavar="FILE", help="Where to write the record")

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        return 0

    runner = ZeroGravityRunner(
        config=ZeroGravityConfig(Path(args.config)) if args.config else None,
        log_level="DEBUG" if args.verbose else "INFO",
    )

    try:
        if args.command == "generate":
            success = runner.generate(args.input, args.output, with_embedding=args.embed, with_stamp=args.stamp)
        elif args.command == "parse":
            success = runner.parse(args.input, as_json=args.json)
        else:
            success = runner.embed(args.input, args.output)
    except Exception as e:
        runner.logger.error(f"{LogCategory.ERROR} Fatal error: {e}")
        return 1

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
