#!/usr/bin/env python3
import argparse
import sys


class UsageErrorParser(argparse.ArgumentParser):
    def error(self, message: str):
        sys.stderr.write("pish: Usage error\n")
        self.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageErrorParser(
        prog="pish",
        description="pish: a small command interpreter with pipes, redirection and subshells",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pish                 # Read commands from standard input
  pish script.sh       # Run the commands in script.sh without prompting
  pish --version       # Show version information
        """,
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Script file to run non-interactively",
    )

    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version information",
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        from pish import __version__

        print(f"pish version {__version__}")
        return 0

    from pish import app

    return app.main(args.script)


if __name__ == "__main__":
    sys.exit(main())
