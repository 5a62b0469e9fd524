import argparse
import sys

from zj import __version__
from zj.app import (
    SHELLS,
    debug_history,
    print_init,
    run_import,
    run_jump,
    run_pipe_mode,
    run_query_mode,
    start_logger,
)
from zj.config import load_config
from zj.importer import ImportSource
from zj.terminal import is_tty

CONFIG_HELP = "Configuration name or path (searches $XDG_CONFIG_HOME/zj/, ./.zj/, or use full path)"


def _load_config(p: argparse.ArgumentParser, args):
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        p.error(str(e))
    if getattr(args, "debug", False):
        config.debug = True
    return config


def _stdin_is_tty() -> bool:
    return is_tty(sys.stdin.fileno())


def _init_main(argv) -> int:
    p = argparse.ArgumentParser(prog="zj init", description="Print the shell integration script")
    p.add_argument("shell", choices=SHELLS, help="Shell to integrate with")
    args = p.parse_args(argv)
    return print_init(args.shell)


def _import_main(argv) -> int:
    p = argparse.ArgumentParser(prog="zj import",
                                description="Import visited directories from shell history")
    p.add_argument("-c", "--config", default=None, help=CONFIG_HELP)
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--zsh-history", dest="source", action="store_const",
                        const=ImportSource.ZSH, help="Read cd commands from zsh history")
    source.add_argument("--bash-history", dest="source", action="store_const",
                        const=ImportSource.BASH, help="Read cd commands from bash history")
    args = p.parse_args(argv)
    config = _load_config(p, args)
    return run_import(config, args.source)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="zj",
        description="Fuzzy directory jumper",
        epilog="Subcommands: 'zj init <bash|zsh>', "
               "'zj import <--zsh-history|--bash-history>'",
    )
    p.add_argument("-v", "--version", action="version",
                   version=f"%(prog)s {__version__}")
    p.add_argument("-c", "--config", default=None, help=CONFIG_HELP)
    p.add_argument("-d", "--debug", action="store_true", default=False,
                   help="Append debug logging to debug.log next to the history file")
    p.add_argument("-q", "--query", nargs="?", const="", default=None, metavar="PREFIX",
                   help="Inline selection for shell completion, starting from PREFIX")
    p.add_argument("--debug-history", action="store_true", default=False,
                   help="Show parsed history entries")
    p.add_argument("words", nargs="*", metavar="QUERY",
                   help="Fuzzy query; with several words the last one is used")
    return p


def run(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] == "init":
        return _init_main(argv[1:])
    if argv and argv[0] == "import":
        return _import_main(argv[1:])

    p = build_parser()
    args = p.parse_args(argv)
    config = _load_config(p, args)
    query = args.words[-1] if args.words else None

    logger = start_logger(config)
    try:
        if not _stdin_is_tty():
            return run_pipe_mode(config, query, logger)
        if args.query is not None:
            return run_query_mode(config, args.query, logger)
        if args.debug_history:
            return debug_history(config, logger=logger)
        return run_jump(config, query, logger)
    finally:
        logger.stop()


def main():
    sys.exit(run())
