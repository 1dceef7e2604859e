#!/usr/bin/env python3
"""
gnuplot-pipe - Main Entry Point

Drive a gnuplot session interactively, or plot one data file and exit.

Usage:
    python main.py                    # Interactive session
    python main.py --verbose          # Echo every command sent to gnuplot
    python main.py --engine gnuplot5  # Use another engine binary
    python main.py --once data.txt    # Plot 1 or 2 columns, wait for ENTER, exit

Commands (see 'help' for parameters):
    style, title, xlabel, ylabel, plot, equation, slope, histogram,
    reset, raw, state, errors, help, quit
"""

import argparse
import shlex
import sys
from pathlib import Path

import numpy as np

# readline is optional (not available on Windows without pyreadline3)
try:
    import readline
    READLINE_AVAILABLE = True
except ImportError:
    READLINE_AVAILABLE = False

HISTORY_FILE = Path.home() / ".gnuplot_pipe_history"

# Commands whose single string argument is the rest of the line, verbatim
_REST_OF_LINE = {"style": "style", "title": "text", "xlabel": "text",
                 "ylabel": "text", "raw": "command"}


def setup_readline():
    """Configure readline for input history."""
    if not READLINE_AVAILABLE:
        return
    readline.set_history_length(500)
    try:
        readline.read_history_file(HISTORY_FILE)
    except (FileNotFoundError, OSError):
        pass


def save_history():
    if not READLINE_AVAILABLE:
        return
    try:
        readline.write_history_file(HISTORY_FILE)
    except OSError:
        pass


def print_welcome(session):
    """Print welcome message."""
    print("=" * 60)
    print("  gnuplot-pipe")
    print("=" * 60)
    print()
    print(f"Connected to {session.engine} (session {session.session_id}).")
    print("Commands are written to gnuplot's stdin; gnuplot never answers,")
    print("so check the plot window for the result.")
    print()
    print("Examples:")
    print("  plot 1 4 9 16 title=squares")
    print("  equation sin(x)*cos(2*x) title='sine wave'")
    print("  slope 2 1")
    print("  histogram edges=0,1,2,3 samples=0.5,1.5,2.5,-1,5")
    print()
    print("Commands: help, errors, quit")
    print("-" * 60)
    print()


def parse_numbers(text):
    """Parse '1 4 9', '1,4,9' or a list of such tokens into floats."""
    if isinstance(text, (list, tuple)):
        text = " ".join(text)
    return [float(tok) for tok in text.replace(",", " ").split()]


def parse_command(line: str) -> tuple[str, dict]:
    """Split a prompt line into a method name and its arguments.

    ``key=value`` tokens fill named parameters; remaining tokens are
    positional and interpreted per command.

    Raises:
        ValueError: unparseable quoting or numbers.
    """
    name, _, rest = line.strip().partition(" ")
    name = name.lower()
    rest = rest.strip()

    if name in _REST_OF_LINE:
        return name, ({_REST_OF_LINE[name]: rest} if rest else {})

    named = {}
    positional = []
    for token in shlex.split(rest):
        key, sep, value = token.partition("=")
        if sep and key.isidentifier():
            named[key] = value
        else:
            positional.append(token)

    if name == "plot":
        if positional:
            if any("," in tok for tok in positional):
                pairs = [parse_numbers(tok) for tok in positional]
                if any(len(p) != 2 for p in pairs):
                    raise ValueError("points must be given as x,y pairs")
                named["values"] = pairs
            else:
                named["values"] = parse_numbers(positional)
    elif name == "equation":
        if positional:
            named["equation"] = " ".join(positional)
    elif name == "slope":
        for key, value in zip(("a", "b"), positional):
            named[key] = float(value)
        for key in ("a", "b"):
            if isinstance(named.get(key), str):
                named[key] = float(named[key])
    elif name == "histogram":
        for key in ("edges", "samples"):
            if key in named:
                named[key] = parse_numbers(named[key])
    elif positional:
        raise ValueError(f"unexpected arguments: {' '.join(positional)}")

    return name, named


def dispatch(session, name: str, args: dict) -> dict:
    """Run one registry method against the session."""
    if name == "style":
        return {"status": "success", "style": str(session.set_style(args["style"]))}
    if name == "title":
        return {"status": "success", "command": session.set_title(args["text"])}
    if name == "xlabel":
        return {"status": "success", "command": session.set_xlabel(args["text"])}
    if name == "ylabel":
        return {"status": "success", "command": session.set_ylabel(args["text"])}
    if name == "plot":
        values = args["values"]
        if values and isinstance(values[0], list):
            xs, ys = zip(*values)
            return session.plot_xy(xs, ys, args.get("title"))
        return session.plot_x(values, args.get("title"))
    if name == "equation":
        return session.plot_equation(args["equation"], args.get("title"))
    if name == "slope":
        return session.plot_slope(args["a"], args["b"], args.get("title"))
    if name == "histogram":
        return session.plot_histogram(
            args["edges"], args["samples"], args.get("overflow", "clamp"),
            args.get("title"),
        )
    if name == "reset":
        return {"status": "success", "removed": session.reset()}
    if name == "raw":
        return {"status": "success", "command": session.send(args["command"])}
    if name == "state":
        return {
            "status": "success",
            "style": str(session.style),
            "plots": session.overlay_count,
            "staged": session.staged.paths,
        }
    raise ValueError(f"Unknown method: {name}")


def print_result(result: dict):
    status = result.get("status")
    if status == "skipped":
        print(f"  skipped: {result['message']}")
        return
    for key, value in result.items():
        if key == "status" or value is None:
            continue
        print(f"  {key}: {value}")


def run_interactive(session):
    """Read commands from the prompt until quit or EOF."""
    from gnuplot_bridge.errors import GnuplotError
    from gnuplot_bridge.logging import log_error, print_recent_errors
    from gnuplot_bridge.registry import render_method_catalog, validate_args

    setup_readline()
    print_welcome(session)

    while True:
        try:
            line = input("gnuplot-pipe> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not line or line.startswith("#"):
            continue
        lowered = line.lower()
        if lowered in ("quit", "exit", "q"):
            break
        if lowered == "help":
            print(render_method_catalog())
            continue
        if lowered == "errors":
            print_recent_errors()
            continue

        try:
            name, args = parse_command(line)
        except ValueError as e:
            print(f"  error: {e}")
            continue

        problems = validate_args(name, args)
        if problems:
            for problem in problems:
                print(f"  error: {problem}")
            continue

        try:
            print_result(dispatch(session, name, args))
        except (GnuplotError, ValueError) as e:
            log_error(f"Command failed: {line}", exc=e, context={"method": name, "args": args})
            print(f"  error: {e}")

    save_history()


def load_columns(path: str):
    """Load one or two whitespace-separated columns of numbers."""
    data = np.loadtxt(path, ndmin=2)
    if data.shape[1] == 1:
        return data[:, 0], None
    return data[:, 0], data[:, 1]


def main():
    parser = argparse.ArgumentParser(description="Drive gnuplot through a command pipe")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show debug output, including every command sent")
    parser.add_argument("--engine", default=None,
                        help="Engine binary name (default: config 'engine' or gnuplot)")
    parser.add_argument("--once", metavar="FILE",
                        help="Plot one or two columns from FILE, wait for ENTER, exit")
    parser.add_argument("--title", default=None, help="Plot title (--once)")
    parser.add_argument("--style", default=None, help="Plot style (--once, default lines)")
    parser.add_argument("--xlabel", default=None, help="X label (--once, default X)")
    parser.add_argument("--ylabel", default=None, help="Y label (--once, default Y)")
    args = parser.parse_args()

    from gnuplot_bridge.logging import setup_logging
    from gnuplot_bridge.commands import open_session, plot_once
    from gnuplot_bridge.errors import GnuplotError

    setup_logging(verbose=args.verbose)

    if args.once:
        try:
            x, y = load_columns(args.once)
        except (OSError, ValueError) as e:
            print(f"Cannot read {args.once}: {e}")
            sys.exit(1)
        try:
            plot_once(x, y, title=args.title, style=args.style,
                      xlabel=args.xlabel, ylabel=args.ylabel, engine=args.engine)
        except GnuplotError as e:
            print(f"Error: {e}")
            sys.exit(1)
        return

    try:
        session = open_session(args.engine)
    except GnuplotError as e:
        print(f"Error: {e}")
        sys.exit(1)

    with session:
        run_interactive(session)


if __name__ == "__main__":
    main()
