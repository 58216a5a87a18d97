import io
import json
import traceback

from cubejs.cubejs_constants import TokenType
from cubejs.cubejs_lexer import tokenize
from cubejs.cubejs_parser import Parser


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def brace_depth(src: str) -> int:
    """Open minus closed curly brackets, ignoring those inside strings and comments.

    Input the lexer rejects counts as balanced so the parser can report it.
    """
    try:
        tokens = tokenize(src)
    except SyntaxError:
        return 0
    opened = sum(tok.type == TokenType.CURLY_BRACKET_OPEN for tok in tokens)
    closed = sum(tok.type == TokenType.CURLY_BRACKET_CLOSE for tok in tokens)
    return opened - closed


def read_source(first_prompt: str = ">>> ") -> str | None:
    """Reads one REPL entry, continuing over lines while braces are unbalanced.

    Returns None when the user asks to leave.
    """
    src_lines: list[str] = []
    while True:
        prompt = first_prompt if not src_lines else "... "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        if brace_depth("\n".join(src_lines)) <= 0:
            break
    return "\n".join(src_lines).strip()


def start_repl(verbose: bool = False) -> None:
    print("cube.js parser REPL. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = read_source()
            if src is None:
                print("Exiting cube.js REPL.")
                return
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue

            try:
                program = Parser().parse(src)
            except SyntaxError as e:
                if verbose:
                    print_traceback()
                else:
                    print(f"[error] >>> {e}")
                continue

            if verbose:
                print(f"[ok] >>> {len(program.body)} statement(s)")
            print(json.dumps(program.to_dict(), indent=2))
        except (KeyboardInterrupt, EOFError):
            print("\nExiting cube.js REPL.")
            return


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
