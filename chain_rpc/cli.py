# cli.py
# ------------------------------------------------------------
# chain-rpc command line.
#
#   chain-rpc 137                 one random working RPC for Polygon
#   chain-rpc all sepolia         every working RPC, shuffled
#   chain-rpc sepolia --no-test   first listed RPC, unprobed
#   chain-rpc id "arbitrum one"   -> 42161
#   chain-rpc name 10             -> OP Mainnet
#   chain-rpc cache clean|build
#   chain-rpc version
# ------------------------------------------------------------

from __future__ import annotations

import argparse
import math
import re
import sys
from typing import Dict, List, Optional

from . import __version__, log
from .config.settings import DEFAULT_PROBE_TIMEOUT, Settings
from .errors import ChainRpcError, ParameterError
from .lookup import (
    build_cache,
    candidate_urls,
    clean_cache,
    fetch_by_id,
    fetch_by_name,
)
from .rpc.prober import find_all_working, find_random_working

PROG = "chain-rpc"
SUBCOMMANDS = ("all", "id", "name", "cache", "version")

COLOR_RED = "\033[31m"
COLOR_RESET = "\033[0m"

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(text: str) -> float:
    """Go-style duration ('200ms', '1.5s', '1m30s') or bare seconds -> seconds."""
    raw = text.strip()
    try:
        value = float(raw)
    except ValueError:
        pos, value = 0, 0.0
        for m in _DURATION_PART.finditer(raw):
            if m.start() != pos:
                break
            value += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
            pos = m.end()
        if pos != len(raw) or not raw:
            raise argparse.ArgumentTypeError(f"invalid duration {text!r}")
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError(f"duration must be positive, got {text!r}")
    return value


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises ParameterError instead of exiting."""

    def error(self, message: str):
        raise ParameterError(message, command=self.prog)


def _add_cache_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("-v", "--verbose", action="store_true", help="enable verbose output")
    p.add_argument("-f", "--force", action="store_true", help="force rebuild cache")


def _add_probe_flags(p: argparse.ArgumentParser, all_mode: bool) -> None:
    p.add_argument(
        "--no-test",
        action="store_true",
        help="return all RPC URLs without testing them" if all_mode else "return RPC URLs without testing them",
    )
    _add_cache_flags(p)
    p.add_argument(
        "-t",
        "--timeout",
        type=parse_duration,
        default=None,
        help=f"timeout for RPC testing (default {int(DEFAULT_PROBE_TIMEOUT * 1000)}ms)",
    )
    p.add_argument("--wss", action="store_true", help="return only WebSocket RPC URLs")
    p.add_argument("--https", action="store_true", help="return only HTTPS RPC URLs")


def build_parsers() -> Dict[str, argparse.ArgumentParser]:
    parsers: Dict[str, argparse.ArgumentParser] = {}

    root = _Parser(
        prog=PROG,
        description="Find first working RPC endpoint for a blockchain network. "
        "Fetches chain data from `chainlist.org` and tests RPC endpoints. "
        "Accepts either chain ID (number) or chain name (string).",
        epilog=f"commands: {', '.join(SUBCOMMANDS)} (see '{PROG} <command> -h')",
    )
    root.add_argument("identifier", metavar="chainId|chainName")
    _add_probe_flags(root, all_mode=False)
    parsers[PROG] = root

    all_p = _Parser(
        prog=f"{PROG} all",
        description="Find all working RPC endpoints for a blockchain network.",
    )
    all_p.add_argument("identifier", metavar="chainId|chainName")
    _add_probe_flags(all_p, all_mode=True)
    parsers["all"] = all_p

    id_p = _Parser(prog=f"{PROG} id", description="Returns the chain ID for the given chain name.")
    id_p.add_argument("chain_name", metavar="chainName")
    _add_cache_flags(id_p)
    parsers["id"] = id_p

    name_p = _Parser(prog=f"{PROG} name", description="Returns the chain name for the given chain ID.")
    name_p.add_argument("chain_id", metavar="chainId")
    _add_cache_flags(name_p)
    parsers["name"] = name_p

    cache_p = _Parser(prog=f"{PROG} cache", description="Manage the local chain data cache.")
    sub = cache_p.add_subparsers(dest="action", parser_class=_Parser)
    sub.add_parser("clean", help="Remove the cache file, forcing a fresh download on next use")
    sub.add_parser("build", help="Download fresh chain data and rebuild the cache file")
    parsers["cache"] = cache_p

    parsers["version"] = _Parser(prog=f"{PROG} version", description="Print the version number.")
    return parsers


def _settings(args: argparse.Namespace, base: Optional[Settings]) -> Settings:
    settings = base or Settings.load()
    verbose = getattr(args, "verbose", False)
    log.configure(verbose)
    settings = settings.with_flags(verbose=verbose, force_rebuild=getattr(args, "force", False))
    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        settings.probe_timeout = timeout
    return settings


def _cmd_lookup(args: argparse.Namespace, settings: Settings, all_mode: bool) -> None:
    record, urls = candidate_urls(args.identifier, settings, ws_only=args.wss, https_only=args.https)
    if args.no_test:
        for url in urls if all_mode else urls[:1]:
            print(url)
        return
    if all_mode:
        for url in find_all_working(urls, record.chain_id, settings.probe_timeout):
            print(url)
    else:
        print(find_random_working(urls, record.chain_id, settings.probe_timeout))


def _cmd_name(args: argparse.Namespace, settings: Settings) -> None:
    raw = args.chain_id.strip()
    if not (raw.isascii() and raw.isdigit()):
        raise ParameterError("chainId must be a valid number", command=f"{PROG} name")
    print(fetch_by_id(int(raw), settings).name)


def dispatch(argv: List[str], parsers: Dict[str, argparse.ArgumentParser], settings: Optional[Settings] = None) -> int:
    if argv and argv[0] in SUBCOMMANDS:
        command, rest = argv[0], argv[1:]
    else:
        command, rest = PROG, argv

    parser = parsers[command]
    if command == PROG and not rest:
        raise ParameterError("accepts 1 arg(s), received 0", command=PROG)
    args = parser.parse_args(rest)

    if command == "version":
        print(__version__)
    elif command == "cache":
        if args.action is None:
            parser.print_help()
        elif args.action == "clean":
            clean_cache(_settings(args, settings))
        else:
            build_cache(_settings(args, settings))
    elif command == "id":
        print(fetch_by_name(args.chain_name, _settings(args, settings)).chain_id)
    elif command == "name":
        _cmd_name(args, _settings(args, settings))
    else:
        _cmd_lookup(args, _settings(args, settings), all_mode=(command == "all"))
    return 0


def format_error(err: Exception, color: bool) -> str:
    msg = str(err)
    if msg.startswith("Error:"):
        msg = msg[len("Error:"):].lstrip()
    prefix = f"{COLOR_RED}Error:{COLOR_RESET}" if color else "Error:"
    return f"{prefix} {msg}"


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parsers = build_parsers()
    try:
        return dispatch(argv, parsers, settings)
    except ParameterError as e:
        print(format_error(e, sys.stderr.isatty()), file=sys.stderr)
        print("", file=sys.stderr)
        parser = parsers.get(_command_key(e.command), parsers[PROG])
        parser.print_help(sys.stderr)
        return 1
    except ChainRpcError as e:
        print(format_error(e, sys.stderr.isatty()), file=sys.stderr)
        return 1


def _command_key(prog: Optional[str]) -> str:
    if not prog or prog == PROG:
        return PROG
    # "chain-rpc cache clean" -> "cache"
    return prog.split()[1]


if __name__ == "__main__":
    sys.exit(main())
