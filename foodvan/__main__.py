"""
Run one of the backends with uvicorn.

Usage:
    python -m foodvan customer
    python -m foodvan vendor --port 9000
"""

import argparse

import uvicorn

from foodvan.core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Food Van Ordering backends")
    parser.add_argument("backend", choices=["customer", "vendor"], help="Backend to serve")
    parser.add_argument("--host", default=settings.api_host, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Port (defaults per backend)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    port = args.port or (settings.customer_port if args.backend == "customer" else settings.vendor_port)
    uvicorn.run(
        f"foodvan.main:{args.backend}_app",
        host=args.host,
        port=port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
