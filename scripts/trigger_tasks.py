"""CLI script to run the periodic maintenance tasks on demand."""
from __future__ import annotations

import argparse

from app.tasks.content import preload_paragraphs
from app.tasks.leaderboard import regenerate_leaderboard


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Regenerate the leaderboard or preload typing content now",
    )
    parser.add_argument(
        "task",
        choices=["leaderboard", "paragraphs"],
        help="Which maintenance task to run",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Leaderboard size or paragraphs per bucket (default: from settings)",
    )
    parser.add_argument(
        "--async",
        action="store_true",
        dest="use_async",
        help="Queue task asynchronously instead of running immediately",
    )

    args = parser.parse_args()
    task = regenerate_leaderboard if args.task == "leaderboard" else preload_paragraphs

    print(f"Running {task.name}")
    if args.use_async:
        queued = task.apply_async(args=(args.limit,))
        print(f"Task queued: {queued.id}")
    else:
        result = task.run(args.limit)
        print(f"Result: {result}")


if __name__ == "__main__":
    main()
