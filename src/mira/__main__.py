"""Mira Voice Assistant entry point.

Usage:
    python -m mira [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --mock           Use mock implementations for every external service
    --text TEXT      Run one typed turn and exit
    --help           Show this help message
    --version        Show version
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from . import __version__
from .config.loader import load_config
from .config.profiles import detect_profile

if TYPE_CHECKING:
    from .router.controller import TurnController
    from .router.turn import TurnResult


def _load_env() -> None:
    # .env in the project root (parent of src/), else the current directory
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()


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
        prog="mira",
        description="Mira Voice Assistant - push-to-talk assistant with memory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m mira                          # Run with auto-detected profile
  python -m mira --profile prod           # Run with production profile
  python -m mira --config my.yaml         # Run with custom config file
  python -m mira --mock --text "hi mira"  # One typed turn with mocks

Environment:
  MIRA_PROFILE       Set profile (dev, prod, test)
  ANTHROPIC_API_KEY  Claude API key (llm.provider: anthropic)
  CARTESIA_API_KEY   Cartesia API key for speech output
  GOOGLE_CSE_KEY     Google Custom Search key
  GOOGLE_CSE_CX      Google Custom Search engine ID
  MONGODB_URI        MongoDB connection string
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
        version=f"Mira Voice Assistant v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock components (no audio hardware, models or network)",
    )

    parser.add_argument(
        "--text",
        metavar="TEXT",
        help="Process a single typed turn and exit",
    )

    return parser.parse_args(argv)


def print_result(result: "TurnResult") -> None:
    """Print a turn summary to stdout."""
    print(f"\nTranscript: {result.transcript}")
    print(f"Outcome: {result.outcome.value}")
    print(f"Intent: {result.intent}")
    print(f"Mood: {result.mood}")
    for reply in result.replies:
        print(f"Mira: {reply}")
    print(f"Total latency: {result.latency_ms}ms")


def run_interactive(controller: "TurnController", logger: logging.Logger) -> None:
    """Push-to-talk loop: Enter starts recording, Enter again stops it."""
    for line in controller.activate():
        print(f"Mira: {line}")

    print("\nPress Enter to talk, Enter again to finish. Ctrl+C to quit.\n")
    while True:
        input("[idle] ")
        if not controller.start_capture():
            print("Mira is busy, try again in a moment.")
            continue

        input("[recording] ")
        result = controller.stop_capture()
        logger.debug(f"Turn result: {result.to_dict()}")
        for reply in result.replies:
            print(f"Mira: {reply}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Mira Voice Assistant.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    _load_env()
    args = parse_args(argv)

    try:
        if args.config:
            config = load_config(path=args.config)
        elif args.profile:
            config = load_config(profile=args.profile)
        else:
            config = load_config(profile=detect_profile().value)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("mira")

    profile_name = args.profile or detect_profile().value
    logger.info(f"Mira Voice Assistant v{__version__}")
    logger.info(f"Profile: {profile_name}")
    logger.info(f"Log level: {config.logging.level}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"Wake words: {', '.join(config.assistant.wake_words)}")
        logger.info(f"STT: {config.stt.provider}:{config.stt.model}")
        logger.info(f"LLM: {config.llm.provider}:{config.llm.model}")
        logger.info(f"TTS: {config.tts.provider}")
        logger.info(f"Storage: {config.storage.backend}")
        return 0

    logger.info("Initializing voice assistant components...")
    try:
        from .router.controller import TurnController

        controller = TurnController.from_config(config, use_mocks=args.mock)
    except Exception as e:
        logger.error(f"Failed to initialize components: {e}")
        print(f"\nError: Failed to initialize voice assistant: {e}")
        print("\nMake sure you have:")
        print("  1. Installed the extras you need: pip install -e '.[local,audio]'")
        print("  2. Started Ollama: ollama serve")
        print(f"  3. Pulled the LLM model: ollama pull {config.llm.model}")
        print("  4. Started MongoDB, or set storage.backend: memory")
        return 1

    try:
        if args.text is not None:
            result = controller.process_text(args.text)
            print_result(result)
            return 0

        print("\n" + "=" * 50)
        print(f"  {config.assistant.name} Voice Assistant")
        print("=" * 50)
        print(f"  Version: {__version__}")
        print(f"  Profile: {profile_name}")
        print(f"  STT: {config.stt.provider} ({config.stt.model})")
        print(f"  LLM: {config.llm.provider} ({config.llm.model})")
        print(f"  TTS: {config.tts.provider}")
        print("=" * 50)

        run_interactive(controller, logger)
    except (KeyboardInterrupt, EOFError):
        logger.info("Shutdown requested, cleaning up...")
    finally:
        controller.shutdown()
        logger.info("Mira shut down gracefully")

    return 0


if __name__ == "__main__":
    sys.exit(main())
