#!/usr/bin/env python3

import argparse
import logging
import sys

from installer_core.configure_logging import configure_logging
from installer_core.constants import LOGGER_NAME
from installer_core.install_mapping import POLICIES
from installer_core.pipeline import EXIT_FAILURE, InstallationPipeline
from installer_core.settings import LOG_LEVELS, load_settings


def build_parser():
    parser = argparse.ArgumentParser(description='Detect the host OS, install Fluentd or Fluent Bit and start it')
    parser.add_argument('--policy',
                        choices=sorted(POLICIES),
                        help='Installer variant to use (default: toolbelt)')
    parser.add_argument('--log-level',
                        choices=LOG_LEVELS,
                        help='Set the console logging level')
    parser.add_argument('--log-dir', help='Directory for installation.log')
    parser.add_argument('--no-pacing', action='store_true', help='Skip the cosmetic pauses between steps')
    parser.add_argument('--list-policies', action='store_true', help='List the installer variants and exit')
    return parser


def list_policies():
    for name in sorted(POLICIES):
        policy = POLICIES[name]
        fallback = f" (fallback: {policy.fallback.name})" if policy.fallback else ""
        print(f"{name}: {policy.description}{fallback}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.list_policies:
        list_policies()
        return 0

    try:
        settings = load_settings(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(log_dir_path=settings.log_dir, console_level=settings.log_level)
    logger = logging.getLogger(LOGGER_NAME)
    try:
        return InstallationPipeline(settings).run()
    except Exception as e:
        logger.error("Installation failed: %s", e, exc_info=True)
        return EXIT_FAILURE


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
