"""packlink - local tarball cache for iterating across dependent projects.

    publish [--watch[=<dir>]]   pack the current package into the cache
    add <name> [--watch]        install the newest cached tarball of <name>

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from args import USAGE, parse_args
from cli_add import run_add
from cli_publish import run_publish
from common.logging_utils import configure_logging, extra_context, is_debug_enabled, log_failure
from config import build_config
from constants import Constants, ExitCodes, Verbs
from errors import PacklinkError


def main(argv=None):
    """Main function of the program."""
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv or argv[0] not in Constants.SUPPORTED_VERBS:
        sys.stdout.write(USAGE)
        sys.exit(ExitCodes.SUCCESS.value)

    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    logger = logging.getLogger(__name__)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    try:
        config = build_config(args.CONFIG, cache_dir=args.CACHE_DIR)
        cwd = os.getcwd()
        if args.action == Verbs.PUBLISH.value:
            run_publish(config, cwd, watch=args.WATCH)
        elif args.action == Verbs.ADD.value:
            run_add(config, cwd, args.PACKAGE, watch=args.WATCH)
    except PacklinkError as e:
        log_failure(logger, e)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        logger.info("Stopped watching.")
        sys.exit(ExitCodes.INTERRUPTED.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
