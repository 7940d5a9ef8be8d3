"""Configuration loading for netmon.

Settings come from three layers, later ones winning:
built-in defaults → TOML config file → command-line flags.
File search order: explicit --config path → ~/.config/netmon/config.toml → defaults only.
"""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

from netmon.connections import DEFAULT_LOCAL_PREFIXES

DEFAULT_CONFIG: dict[str, Any] = {
    "debug": False,
    "max_peers": 10,
    "seconds": 30,
    "size": 1000,
    "rx_symbol": "@",
    "tx_symbol": "#",
    "both_symbol": "*",
    "interface": 0,
    "tick_interval_ms": 1000,
    "local_prefixes": list(DEFAULT_LOCAL_PREFIXES),
}

_DEFAULT_PATH = Path.home() / ".config" / "netmon" / "config.toml"


class ConfigError(Exception):
    """Unknown flag, malformed value, or unreadable config file."""


def _read_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML file, reporting unreadable or malformed files as ConfigError."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merging user TOML over defaults.

    All settings are top-level scalars or lists, so a user value replaces
    the default outright.

    Args:
        path: Explicit config file path (from --config). If None, tries the
              default location ~/.config/netmon/config.toml.

    Returns:
        Merged configuration dict.

    Raises:
        ConfigError: If an explicit path doesn't exist, can't be read or
            can't be parsed.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"config file not found: {path}")
        return {**DEFAULT_CONFIG, **_read_toml(path)}

    # Try default location silently
    if _DEFAULT_PATH.is_file():
        try:
            return {**DEFAULT_CONFIG, **_read_toml(_DEFAULT_PATH)}
        except ConfigError as e:
            print(f"netmon: warning: ignoring {e}", file=sys.stderr)

    return dict(DEFAULT_CONFIG)


def dump_default_config() -> str:
    """Return the default configuration as a TOML string."""
    lines = [
        "# netmon configuration",
        "# Place this file at ~/.config/netmon/config.toml",
        "",
    ]
    for key, value in DEFAULT_CONFIG.items():
        if isinstance(value, bool):
            lines.append(f"{key} = {'true' if value else 'false'}")
        elif isinstance(value, str):
            lines.append(f'{key} = "{value}"')
        elif isinstance(value, list):
            items = ", ".join(f'"{v}"' for v in value)
            lines.append(f"{key} = [{items}]")
        else:
            lines.append(f"{key} = {value}")
    return "\n".join(lines) + "\n"


# ── Validated options ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Options:
    debug: bool = False
    max_peers: int = 10
    seconds: int = 30
    size: int = 1000
    rx_symbol: str = "@"
    tx_symbol: str = "#"
    both_symbol: str = "*"
    interface: int = 0
    tick_interval_ms: int = 1000
    local_prefixes: tuple[str, ...] = DEFAULT_LOCAL_PREFIXES

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> Options:
        """Validate a merged config dict.

        Raises:
            ConfigError: On a missing key, wrong type or out-of-range value.
        """
        unknown = set(cfg) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigError(f"unknown config key(s): {', '.join(sorted(unknown))}")

        def _int(key: str, minimum: int | None = None) -> int:
            value = cfg.get(key, DEFAULT_CONFIG[key])
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be an integer, got {value!r}")
            if minimum is not None and value < minimum:
                raise ConfigError(f"{key} must be >= {minimum}, got {value}")
            return value

        def _symbol(key: str) -> str:
            value = cfg.get(key, DEFAULT_CONFIG[key])
            if not isinstance(value, str) or len(value) != 1:
                raise ConfigError(f"{key} must be a single character, got {value!r}")
            return value

        debug = cfg.get("debug", False)
        if not isinstance(debug, bool):
            raise ConfigError(f"debug must be true or false, got {debug!r}")

        prefixes = cfg.get("local_prefixes", DEFAULT_CONFIG["local_prefixes"])
        if not isinstance(prefixes, (list, tuple)) or not all(
            isinstance(p, str) for p in prefixes
        ):
            raise ConfigError("local_prefixes must be a list of strings")

        return cls(
            debug=debug,
            max_peers=_int("max_peers"),
            seconds=_int("seconds", 1),
            size=_int("size", 2),
            rx_symbol=_symbol("rx_symbol"),
            tx_symbol=_symbol("tx_symbol"),
            both_symbol=_symbol("both_symbol"),
            interface=_int("interface", 0),
            tick_interval_ms=_int("tick_interval_ms", 1),
            local_prefixes=tuple(prefixes),
        )


# ── Command-line flags ─────────────────────────────────────────────────────


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise ConfigError(message)


def _bool_flag(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true/false, got {value!r}")


# argparse dests that override config keys of the same name
_FLAG_KEYS = (
    "debug",
    "max_peers",
    "seconds",
    "size",
    "rx_symbol",
    "tx_symbol",
    "both_symbol",
    "interface",
    "tick_interval_ms",
)


def build_parser() -> argparse.ArgumentParser:
    d = DEFAULT_CONFIG
    parser = _FlagParser(
        prog="netmon",
        description="Live terminal graph of interface throughput and remote peers.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--debug", type=_bool_flag, nargs="?", const=True, default=None,
        help=f"Print raw history and interface stats each tick (default: {d['debug']})",
    )
    parser.add_argument(
        "--maxPeers", dest="max_peers", type=int, default=None,
        help=f"Maximum number of peer addresses listed (default: {d['max_peers']})",
    )
    parser.add_argument(
        "--seconds", type=int, default=None,
        help=f"Seconds of history shown on the graph (default: {d['seconds']})",
    )
    parser.add_argument(
        "--size", type=int, default=None,
        help=f"Base for unit conversion, e.g. 1000 or 1024 (default: {d['size']})",
    )
    parser.add_argument(
        "--rxSymbol", "--rxGraph", dest="rx_symbol", default=None,
        help=f"Receive graph symbol (default: {d['rx_symbol']})",
    )
    parser.add_argument(
        "--txSymbol", "--txGraph", dest="tx_symbol", default=None,
        help=f"Transmit graph symbol (default: {d['tx_symbol']})",
    )
    parser.add_argument(
        "--bothSymbol", "--graph", dest="both_symbol", default=None,
        help=f"Combined graph symbol (default: {d['both_symbol']})",
    )
    parser.add_argument(
        "--interfaceIndex", "--interface", dest="interface", type=int, default=None,
        help=f"Index of the network interface monitored (default: {d['interface']})",
    )
    parser.add_argument(
        "--tickIntervalMs", dest="tick_interval_ms", type=int, default=None,
        help=f"Milliseconds between refreshes (default: {d['tick_interval_ms']})",
    )
    parser.add_argument(
        "--config", type=Path, default=None, metavar="PATH",
        help="Path to TOML config file",
    )
    parser.add_argument(
        "--dump-config", action="store_true",
        help="Print the default configuration as TOML and exit",
    )
    return parser


def parse_flags(argv: list[str] | None = None) -> tuple[Options, bool]:
    """Parse command-line flags into validated options.

    Returns:
        ``(options, dump_config)``.

    Raises:
        ConfigError: Unknown flag, malformed value, or bad config file.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    overrides = {
        key: getattr(args, key)
        for key in _FLAG_KEYS
        if getattr(args, key) is not None
    }
    return Options.from_config({**cfg, **overrides}), args.dump_config
