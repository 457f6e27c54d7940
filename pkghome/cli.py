#!/usr/bin/env python3
"""
Command-line interface for pkghome - package home page builder.
"""

import os
import sys
import argparse
from typing import List, Optional

from . import __version__
from .core import HomeBuilder, setup_logging
from .render import RscriptRenderer
from .settings import SiteSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='pkghome - build the home page of a package site')
    parser.add_argument('pkg', nargs='?', default='.',
                        help='Path to the package root (default: current directory)')
    parser.add_argument('--path', dest='destination', type=str,
                        help='Output directory, relative to the package root')
    parser.add_argument('--depth', type=int,
                        help='Depth of the page below the site root')
    parser.add_argument('--encoding', type=str,
                        help='Encoding of the source files and output')
    parser.add_argument('--templates', type=str,
                        help='Directory with home.html and authors.html templates')
    parser.add_argument('--registry-mirror', type=str,
                        help='Package registry mirror used for the download link check')
    parser.add_argument('--no-registry', dest='check_registry', action='store_false', default=None,
                        help='Skip the package registry check')
    parser.add_argument('--rscript', type=str, default='Rscript',
                        help='Rscript executable used to render R Markdown')
    parser.add_argument('--log-dir', type=str,
                        help='Write a debug log file into this directory')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug output on the console')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logger = setup_logging(verbose=args.verbose, log_dir=args.log_dir)

    try:
        settings_loader = SiteSettings(args.pkg)
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {k: v for k, v in vars(args).items()
                     if v is not None and k not in ('pkg', 'rscript', 'log_dir', 'verbose')}
        final_settings = settings_loader.merge_with_args(args_dict)

        output_dir = os.path.expanduser(final_settings['destination'])

        builder = HomeBuilder(
            pkg_path=args.pkg,
            output_dir=output_dir,
            options=settings_loader.build_options(final_settings),
            home_config=settings_loader.home_config(),
            rich_renderer=RscriptRenderer(args.rscript),
        )
        try:
            index_path = builder.build_home()
        finally:
            builder.close()
        logger.debug(f"Home page written to {index_path}")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
