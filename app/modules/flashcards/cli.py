from __future__ import annotations

import argparse
import json
from pathlib import Path

from app.modules.flashcards.generator import generate_flashcards_sync


def _load_prompt(args: argparse.Namespace) -> str:
    if args.prompt and args.prompt_file:
        raise SystemExit("Provide either --prompt or --prompt-file, not both")
    if args.prompt_file:
        return Path(args.prompt_file).read_text(encoding="utf-8")
    if args.prompt:
        return args.prompt
    raise SystemExit("--prompt or --prompt-file is required")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="flashcards-gen", description="Flashcards generator CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate flashcards from a text")
    g.add_argument("--prompt", "-p", help="Text or topic to turn into flashcards")
    g.add_argument("--prompt-file", help="Path to a file containing the text")

    args = parser.parse_args(argv)
    if args.cmd == "generate":
        prompt = _load_prompt(args)
        if not prompt.strip():
            raise SystemExit("Please enter your text to generate flashcards.")
        cards = generate_flashcards_sync(prompt)
        print(json.dumps([c.model_dump() for c in cards], indent=2))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
