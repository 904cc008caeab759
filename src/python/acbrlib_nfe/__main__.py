# acbrlib_nfe/__main__.py
"""Small diagnostic command line: python -m acbrlib_nfe --help"""
import argparse
import logging
import sys

from . import __version__
from .nfe import ACBrLibNFe
from .dataclasses import InitOptions
from .exceptions import ACBrLibError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acbrlib_nfe",
        description="Query a local ACBrLibNFe installation.",
    )
    parser.add_argument("--lib", help="Native library path. Env: ACBRLIB_NFE_PATH")
    parser.add_argument("--config", help="INI configuration file. Env: ACBRLIB_NFE_CONFIG")
    parser.add_argument("--key", help="Configuration key. Env: ACBRLIB_NFE_KEY")
    parser.add_argument("--stdcall", action="store_true", help="Load the StdCall build (Windows).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("info", help="Print the library name and version.")
    sub.add_parser("status", help="Query the SEFAZ service status.")
    sub.add_parser("certificates", help="List the installed certificates.")
    config_get = sub.add_parser("config-get", help="Read one configuration item.")
    config_get.add_argument("session")
    config_get.add_argument("key")
    return parser


def run(lib: ACBrLibNFe, args: argparse.Namespace) -> int:
    if args.command == "info":
        results = [lib.get_lib_name(), lib.get_lib_version()]
    elif args.command == "status":
        results = [lib.check_service_status()]
    elif args.command == "certificates":
        results = [lib.get_certificates()]
    else:
        results = [lib.get_config_item_value(args.session, args.key)]

    for result in results:
        stream = sys.stdout if result.ok else sys.stderr
        print(result.response, file=stream)
        if not result.ok:
            return 1
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    env_options = InitOptions.from_env()
    options = InitOptions(
        config_file=args.config if args.config is not None else env_options.config_file,
        key_crypt=args.key if args.key is not None else env_options.key_crypt,
        buffer_size=env_options.buffer_size,
        encoding=env_options.encoding,
    )
    calling_convention = "stdcall" if args.stdcall else "cdecl"

    try:
        with ACBrLibNFe(args.lib, options, calling_convention=calling_convention) as lib:
            init = lib.initialize()
            if not init.ok:
                print(init.response, file=sys.stderr)
                return 1
            return run(lib, args)
    except ACBrLibError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
