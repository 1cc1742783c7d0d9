"""Nurtra entry point.

Usage:
    python -m nurtra [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --mock           Run offline with in-memory stores and mock audio
    --help           Show this help message
    --version        Show version
"""

from pathlib import Path as _Path

from dotenv import load_dotenv

# Load .env before anything reads the environment
_env_file = _Path(__file__).parent.parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import NurtraConfig
from .config.loader import load_config
from .config.profiles import detect_profile
from .quotes.precache import precache_quotes
from .session.app import NurtraApp
from .session.controller import ExitReason
from .storage.errors import StorageError
from .timer.format import time_string
from .timer.models import TimerState
from .tts.cache import SpeechCache

OUTCOME_TIMEOUT = 10.0


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="nurtra",
        description="Nurtra - craving-intervention companion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m nurtra                     # Run with auto-detected profile
  python -m nurtra --profile prod      # Run with production profile
  python -m nurtra --mock              # Run offline without MongoDB or audio
  python -m nurtra --precache          # Cache audio for all of the user's quotes

Environment:
  NURTRA_PROFILE       Set profile (dev, prod, test)
  NURTRA_USER_ID       Signed-in user
  NURTRA_MONGODB_URI   MongoDB connection URI
  ELEVENLABS_API_KEY   ElevenLabs API key
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Nurtra v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use in-memory stores, mock speech and mock audio",
    )

    parser.add_argument(
        "--user",
        metavar="ID",
        help="User ID to act as (overrides NURTRA_USER_ID)",
    )

    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete all cached quote audio and exit",
    )

    parser.add_argument(
        "--precache",
        action="store_true",
        help="Synthesize and cache audio for the user's quotes and exit",
    )

    return parser.parse_args(argv)


def run_craving_session(app: NurtraApp, logger: logging.Logger) -> int:
    """Run one craving session in the terminal.

    Enter ends it as overcome; 'r' then Enter ends it as a relapse.

    Returns:
        Exit code
    """
    app.start()
    if app.timer.state is TimerState.IDLE:
        app.timer.start_timer()

    print(f"\n  Binge-free for {time_string(app.timer.elapsed)}")
    print("  Take a breath. Quotes will play until you are ready.\n")
    print("  [Enter]      the craving has passed")
    print("  [r] [Enter]  I binged\n")

    app.session.enter()
    try:
        answer = input("> ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        logger.info("Session interrupted, nothing recorded")
        app.session.abort()
        return 130

    reason = ExitReason.RELAPSED if answer.startswith("r") else ExitReason.OVERCAME
    outcome = app.session.exit(reason)
    if outcome is not None:
        try:
            outcome.result(timeout=OUTCOME_TIMEOUT)
        except TimeoutError:
            logger.warning(f"Outcome not saved after {OUTCOME_TIMEOUT:.0f}s")
        except Exception as e:
            logger.error(f"Failed to record session outcome: {e}")
    app.timer.shutdown()

    if reason is ExitReason.RELAPSED:
        period = app.timer.last_period
        if period is not None:
            print(f"\n  Logged a binge-free period of {time_string(period.duration)}.")
        print("  Be kind to yourself. The timer starts again when you are ready.\n")
    else:
        print(f"\n  Well done. Cravings overcome: {app.account.overcome_count}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Nurtra.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)

    try:
        config = load_config(path=args.config, profile=args.profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("nurtra")

    logger.info(f"Nurtra v{__version__}")
    logger.info(f"Config: {args.config or args.profile or detect_profile().value}")
    logger.info(f"Log level: {config.logging.level}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"TTS: {config.tts.provider} ({config.tts.voice_id})")
        logger.info(f"Speech cache: {config.cache.directory}")
        logger.info(f"Storage: {config.storage.database}")
        return 0

    if args.clear_cache:
        removed = SpeechCache(config.cache.directory, suffix=config.cache.suffix).clear()
        print(f"Removed {removed} cached clips")
        return 0

    return run(config, args, logger)


def run(config: NurtraConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Build the app and run the requested command."""
    use_mocks = config.testing.use_mocks or args.mock

    try:
        app = NurtraApp.from_config(config, use_mocks=use_mocks, user_id=args.user)
    except StorageError as e:
        logger.error(f"Failed to connect to storage: {e}")
        print(f"\nError: {e}\nStart MongoDB or run with --mock.", file=sys.stderr)
        return 1
    except RuntimeError as e:
        logger.error(f"Failed to initialize components: {e}")
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    try:
        if args.precache:
            texts = [quote.text for quote in app.quotes.fetch_quotes()]
            result = precache_quotes(texts, app.synthesizer, app.cache, app.loop.voice)
            print(f"Cached {result.cached}, skipped {result.skipped}, failed {result.failed}")
            return 0 if result.failed == 0 else 1

        return run_craving_session(app, logger)
    except StorageError as e:
        logger.error(f"Storage error: {e}")
        return 1
    finally:
        app.shutdown()


if __name__ == "__main__":
    sys.exit(main())
