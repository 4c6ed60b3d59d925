"""
ReviewHub - Web Server Entry Point
==================================

Run this to start the API:
    python main.py

Requires MONGODB_URL (and GOOGLE_API_KEY for likes/dislikes generation),
either exported or in a .env file.
"""

import uvicorn

from reviewhub.infrastructure.config import get_settings


def main():
    """Start the web server."""
    settings = get_settings()

    print("\n" + "=" * 50)
    print("   ReviewHub - API Server")
    print("=" * 50)
    print(f"\n   Starting server at http://{settings.server.host}:{settings.server.port}")
    print("   Press Ctrl+C to stop\n")

    uvicorn.run(
        "reviewhub.web.app:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
