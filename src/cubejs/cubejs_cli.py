"""
cube.js parser CLI Entrypoint.

This module provides the command-line interface for parsing cube.js schema files.
It supports printing the AST as JSON and an interactive REPL mode.

Features:
    - Read source from `.js` files or inline strings.
    - Parse code into an AST and serialize it as JSON.
    - Output to console or file.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    cubejs schema/Orders.js
    cubejs -s "let a = 1 + 2" -p
    cubejs schema/Orders.js -o orders.ast.json
    cubejs --repl --verbose

Functions:
    run_cubejs(source: str, is_string: bool = False, out: Optional[str] = None,
               pretty: bool = False) -> None:
        Executes the full pipeline (lex → parse → serialize → output).

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or parse).
"""

import argparse
import json
import sys

from cubejs.cubejs_parser import Parser


def run_cubejs(
    source: str,
    is_string: bool = False,
    out: str | None = None,
    pretty: bool = False,
) -> None:
    """
    Run the parser: read, parse, and print or write the AST as JSON.

    Args:
        source (str): The schema source code or path to a `.js` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        out (str | None): Optional path to write the JSON output. If None, prints to stdout.
        pretty (bool): If True, indents the JSON and prints banners. Defaults to False.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.js'.
        SyntaxError: If the source is not well formed.
    """
    if not is_string and not source.endswith(".js"):
        raise ValueError("Only .js schema files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Parsing
    program = Parser().parse(source)

    # 3. Serializing
    text = json.dumps(program.to_dict(), indent=2 if pretty else None)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text)
        if pretty:
            print(f"(wrote to {out})")
    elif pretty:
        banner = "=" * 20
        print(f"{banner}\nAST\n{banner}\n{text}\n{banner}\n")
    else:
        print(text)


def main() -> None:
    """
    Entry point for the cube.js parser CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, parses the source and outputs its AST.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-o`, `--out`: Write the JSON AST to a file.
        - `-p`, `--pretty`: Indent the JSON and show banners.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable verbose REPL mode.

    Syntax errors and unsupported inputs are reported as `[error] >>>` lines on
    stderr with exit status 1.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from cubejs.cubejs_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="cubejs")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Indent JSON and show banners"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from cubejs.cubejs_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    try:
        run_cubejs(
            source=args.source,
            is_string=args.string,
            out=args.out,
            pretty=args.pretty,
        )
    except (SyntaxError, ValueError, OSError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
