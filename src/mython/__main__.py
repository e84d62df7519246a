import argparse
import logging
import sys
from pathlib import Path

from .main import Interpreter


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m mython",
        usage="python -m mython [--strict] [--verbose] [script.my]",
    )
    parser.add_argument("script", nargs="?", help="program to run; stdin when omitted")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="calling a method that does not exist is an error",
    )
    parser.add_argument("--verbose", action="store_true", help="log interpreter activity")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args_list = sys.argv[1:] if argv is None else argv
    try:
        args = parser.parse_args(args_list)
    except SystemExit as exc:
        return int(exc.code)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    interpreter = Interpreter(strict_method_calls=args.strict)
    if args.script is None:
        result = interpreter.run(sys.stdin.read(), output=sys.stdout)
    else:
        script_path = Path(args.script).resolve()
        if not script_path.is_file():
            print(f"mython: script not found: {script_path}", file=sys.stderr)
            return 2
        result = interpreter.run_path(script_path, output=sys.stdout)

    if result.exception is not None:
        exc = result.exception
        print(f"mython: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
