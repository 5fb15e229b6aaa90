"""Module entrypoint for running agentlocator as ``python -m agentlocator``."""

from __future__ import annotations

from agentlocator.cli import main


if __name__ == "__main__":
    main()
