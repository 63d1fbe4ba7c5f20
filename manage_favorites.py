#!/usr/bin/env python3
"""
Favorites Management Utility

Drives the favorites client from the command line:
- List the signed-in user's favorite books
- Add a book to favorites
- Remove a book from favorites
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from utilities.logger import setup_logging, get_logger
from utilities.config import config
from client.book_service import BookService
from client.favorite_books import FavoriteBooks


class ConsoleNotifier:
    """Prints notifications to the terminal."""

    def success(self, message: str) -> None:
        print(f"✅ {message}")

    def info(self, message: str) -> None:
        print(f"ℹ️  {message}")

    def error(self, message: str) -> None:
        print(f"❌ {message}")


def print_books(favorites: FavoriteBooks) -> None:
    """Print the favorites list."""
    print("\n" + "=" * 80)
    print("⭐ FAVORITE BOOKS")
    print("=" * 80)

    if favorites.last_error:
        print(f"❌ Could not load favorites: {favorites.last_error}")
        return

    if not favorites.books:
        print("No favorite books yet")
        return

    for i, book in enumerate(favorites.books, 1):
        print(f"{i:3d}. {book.title} by {book.author}")
        print(f"     ID: {book.id}")


async def main():
    """Main function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_favorites.py [list|add|remove] [book_id]")
        print()
        print("Commands:")
        print("  list     - List favorite books")
        print("  add      - Add a book to favorites")
        print("  remove   - Remove a book from favorites")
        print()
        print("Examples:")
        print("  python manage_favorites.py list")
        print("  python manage_favorites.py add 64b000000000000000000001")
        sys.exit(1)

    command = sys.argv[1].lower()

    # Setup logging
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    logger = get_logger(__name__)
    logger.info("Running favorites command", command=command, api_base_url=config.api_base_url)

    favorites = FavoriteBooks(BookService(), ConsoleNotifier())

    if command == "list":
        await favorites.activate()
        print_books(favorites)
    elif command in ("add", "remove"):
        if len(sys.argv) < 3:
            print(f"❌ Error: book id required for {command} command")
            print(f"Usage: python manage_favorites.py {command} <book_id>")
            sys.exit(1)
        await favorites.activate()
        if not await favorites.toggle_favorite(sys.argv[2], command == "remove"):
            sys.exit(1)
    else:
        print(f"❌ Unknown command: {command}")
        print("Available commands: list, add, remove")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
