"""Entry point: serve | demo | validate."""

import asyncio
import sys

USAGE = "Usage: python -m src.main [serve|demo|validate]"


def main():
    mode = "serve"
    if len(sys.argv) > 1:
        mode = sys.argv[1].lower()

    if mode == "serve":
        from src.mcp.server import run_stdio

        sys.exit(asyncio.run(run_stdio()))

    elif mode in ("demo", "validate"):
        from src.interfaces.demo import main as run_demo_main

        sys.exit(run_demo_main(mode))

    else:
        print(f"Unknown mode: {mode}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
