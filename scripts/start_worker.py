#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a Celery worker that consumes the default and imports queues.
#
# Usage:
#   # Start worker (development)
#   python scripts/start_worker.py
#
#   # Only run Places imports, 4 processes
#   python scripts/start_worker.py --queues imports --concurrency 4
#
#   # Or use Celery CLI directly
#   celery -A workers.celery_app worker --loglevel=info -Q default,imports
#
# Prerequisites:
#   - Redis must be running (REDIS_URL)
#   - Environment variables must be set (.env file)
#   - GOOGLE_PLACES_API_KEY for imports
# =============================================================================

import argparse
import os
import sys

# Add project root to path when run as a plain script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workers.celery_app import celery_app  # noqa: E402


def main():
    """Start the Celery worker."""
    parser = argparse.ArgumentParser(description="Run the directory import worker")
    parser.add_argument("--concurrency", type=int, default=2, help="Worker processes")
    parser.add_argument("--queues", default="default,imports", help="Comma-separated queues")
    parser.add_argument("--loglevel", default="info")
    args = parser.parse_args()

    print("=" * 60)
    print("Directory Import Worker")
    print(f"Queues: {args.queues}  Concurrency: {args.concurrency}")
    print("=" * 60)
    print("Press Ctrl+C to stop")

    celery_app.worker_main([
        "worker",
        f"--loglevel={args.loglevel}",
        f"--concurrency={args.concurrency}",
        f"--queues={args.queues}",
    ])


if __name__ == "__main__":
    main()
