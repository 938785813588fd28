#!/usr/bin/env python3
"""
ghdispatch - Interactive GitHub Actions workflow dispatcher

Walks through repo → branch → workflow (or bookmark) → inputs, then runs
`gh workflow run` with the collected values.
"""

import argparse
import sys

from ruamel.yaml.error import YAMLError

from ghdispatch import __version__
from ghdispatch import ui
from ghdispatch.config import CONFIG_ENV_VAR, resolve_config_path
from ghdispatch.dispatch import run_workflow_creation
from ghdispatch.gh import GHError
from ghdispatch.log import get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghdispatch",
        description="ghdispatch - Interactive GitHub Actions workflow dispatcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  ghdispatch                       # Use ./config.yml
  ghdispatch -c ~/repos.yml        # Use a specific config file

Config file lookup: --config, then ${CONFIG_ENV_VAR}, then ./config.yml
        """
    )

    parser.add_argument(
        '-c', '--config',
        type=str,
        default=None,
        help='Path to the repository config file (default: ./config.yml)'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'ghdispatch {__version__}'
    )
    return parser


def main(argv=None):
    """Main entry point for ghdispatch CLI."""
    args = build_parser().parse_args(argv)
    config_path = resolve_config_path(args.config)

    try:
        run_workflow_creation(config_path)
    except FileNotFoundError as e:
        get_logger().error(f"Config not found: {e}")
        ui.error(f"Config file not found: {config_path}")
        sys.exit(1)
    except UnicodeDecodeError as e:
        get_logger().error(f"Config {config_path} is not UTF-8: {e}")
        ui.error(f"Could not read {config_path}: not a UTF-8 text file")
        sys.exit(1)
    except OSError as e:
        get_logger().error(f"Could not read config {config_path}: {e}")
        ui.error(f"Could not read {config_path}: {e.strerror or e}")
        sys.exit(1)
    except YAMLError as e:
        get_logger().error(f"Invalid YAML in {config_path}: {e}")
        ui.error(f"Could not parse {config_path}: {e}")
        sys.exit(1)
    except GHError as e:
        ui.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
