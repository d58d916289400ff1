"""
WrathWord Puzzle Server - Main Entry Point

Initializes the game service and starts the Flask application.
"""

from wrathword import create_app
from wrathword.config import Config, get_word_statistics, WORD_LISTS
from wrathword.services.game_service import initialize_game_service
from wrathword.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        game_service = initialize_game_service(Config)
        storage = "MongoDB" if Config.MONGO_URI else "in-memory"
        print(f"✓ Game service initialized ({storage} storage)")

        for length, stats in get_word_statistics(WORD_LISTS).items():
            print(f"  {length} letters: {stats['answers']} answers, {stats['allowed']} allowed guesses")

        print("Creating Flask application...")
        app = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info(f"WrathWord server starting; today is {game_service.clock()} in {Config.TIMEZONE}")

        print(f"\nStarting WrathWord server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("WrathWord server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
