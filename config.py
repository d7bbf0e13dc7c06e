"""
Configuration settings for the Trade Journal.

Centralized config makes it easy to modify behavior without touching core logic.
"""
from dataclasses import dataclass, field
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class JournalConfig:
    """Ledger behaviour."""
    default_starting_balance: float = field(
        default_factory=lambda: _env_float("JOURNAL_STARTING_BALANCE", 1000.0)
    )
    # Raise on unparsable profit/date/balance input instead of coercing it
    strict_input: bool = field(
        default_factory=lambda: _env_bool("JOURNAL_STRICT_INPUT", False)
    )


@dataclass
class UIConfig:
    """User interface settings."""
    currency_symbol: str = "$"
    max_display_trades: int = 500
    chart_height: int = 350


@dataclass
class Paths:
    """File system paths."""
    base_dir: Path = Path(__file__).parent
    journal_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("JOURNAL_STORE_DIR", str(Path(__file__).parent / "journal" / "logs"))
        )
    )

    def __post_init__(self):
        # Create directories if they don't exist
        self.journal_dir.mkdir(parents=True, exist_ok=True)


# Global config instances
journal_config = JournalConfig()
ui_config = UIConfig()
paths = Paths()
