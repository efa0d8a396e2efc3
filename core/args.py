# core/args.py
from __future__ import annotations
import argparse
import re
from importlib import metadata
from typing import Callable, Iterable, List, Optional, Sequence

from core.models import ACTION_NAMES, PREFERENCE_NAMES, Argument, ArgumentSequence, ArgumentValue

PROG = "ai-runner"
DIST_NAME = "ai-sequence-runner"

_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")

EPILOG = """
Actions (the order matters, can be used multiple times):
  --action <action>           Perform an action
  --assert <assert>           Perform an assert
  --query-output <path>       Save the result of the next --query to a file, must be put before --query
  --query <query>             Perform a query
  --sleep <ms>                Sleep for a number of milliseconds

Examples:
  # headed mode (i.e. visible browser) to visit bing.com and search for 'weather today'
  ai-runner --headed --url https://www.bing.com --action "type 'weather today' in search box, hit enter" --sleep 3000

  # visit github status page and save the status to ./status.json
  ai-runner --url https://www.githubstatus.com/ \\
    --query-output status.json \\
    --query '{name: string, status: string}[], service status of github page'
"""

_PREFERENCE_HELP = {
    "url": "The URL to visit, required",
    "user-agent": "The user agent to use",
    "viewport-width": "The width of the viewport",
    "viewport-height": "The height of the viewport",
    "viewport-scale": "The device scale factor",
    "headed": "Run in headed mode, default false",
}

# keeps help output in a stable, readable order
_PREFERENCE_ORDER = ("url", "user-agent", "viewport-width", "viewport-height", "viewport-scale", "headed")
_ACTION_ORDER = ("action", "assert", "query-output", "query", "sleep")


def package_version() -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def coerce_value(raw: ArgumentValue) -> ArgumentValue:
    """Numbers become int/float, 'true'/'false' become bool, everything else stays as given."""
    if not isinstance(raw, str):
        return raw
    s = raw.strip()
    if s.lower() == "true":
        return True
    if s.lower() == "false":
        return False
    if _INT_RE.match(s):
        return int(s)
    if _FLOAT_RE.match(s):
        return float(s)
    return raw


class OrderedArgumentAction(argparse.Action):
    """Appends every occurrence to one shared list so interleaved options keep their order."""

    def __call__(self, parser, namespace, values, option_string=None):
        items = list(getattr(namespace, self.dest, None) or [])
        name = (option_string or self.option_strings[0]).lstrip("-")
        items.append(Argument(name, coerce_value(values)))
        setattr(namespace, self.dest, items)


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog=PROG,
        description="Run natural-language browser actions, asserts and queries in order.",
        usage=f"{PROG} [options] [actions]",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s version {package_version()}")

    prefs = ap.add_argument_group("options")
    for name in _PREFERENCE_ORDER:
        prefs.add_argument(
            f"--{name}", dest="sequence", action=OrderedArgumentAction, nargs="?",
            const=True if name == "headed" else None,
            metavar="<bool>" if name == "headed" else f"<{name}>",
            help=_PREFERENCE_HELP[name],
        )

    acts = ap.add_argument_group("actions")
    for name in _ACTION_ORDER:
        acts.add_argument(
            f"--{name}", dest="sequence", action=OrderedArgumentAction, nargs="?",
            const=None, metavar=f"<{name}>", help=argparse.SUPPRESS,
        )
    return ap


def _unknown_to_arguments(extras: Sequence[str]) -> List[Argument]:
    out: List[Argument] = []
    i = 0
    while i < len(extras):
        tok = extras[i]
        if tok.startswith("--"):
            body = tok[2:]
            if "=" in body:
                name, raw = body.split("=", 1)
                out.append(Argument(name, coerce_value(raw)))
            elif i + 1 < len(extras) and not extras[i + 1].startswith("--"):
                out.append(Argument(body, coerce_value(extras[i + 1])))
                i += 1
            else:
                out.append(Argument(body, True))
        else:
            out.append(Argument(tok.lstrip("-") or tok, None))
        i += 1
    return out


def parse_argv(argv: Optional[Sequence[str]] = None) -> ArgumentSequence:
    """Tokenize argv into the ordered argument sequence.

    Unrecognized tokens are kept as arguments so the classifier can reject them by name.
    --help and --version are handled by argparse and exit the process.
    """
    ap = build_argparser()
    ns, extras = ap.parse_known_args(argv)
    known = list(getattr(ns, "sequence", None) or [])
    return tuple(known + _unknown_to_arguments(extras))


def find_only_item(
    sequence: Iterable[Argument],
    predicate: Callable[[Argument], bool],
    on_many: Optional[Callable[[List[Argument]], Exception]] = None,
) -> Optional[Argument]:
    """Return the single matching argument, None when nothing matches.

    More than one match raises whatever ``on_many`` builds (ValueError by default).
    """
    matches = [arg for arg in sequence if predicate(arg)]
    if not matches:
        return None
    if len(matches) > 1:
        if on_many is not None:
            raise on_many(matches)
        raise ValueError(f"expected at most one match, got {len(matches)}")
    return matches[0]


def is_known_name(name: str) -> bool:
    return name in PREFERENCE_NAMES or name in ACTION_NAMES
