import argparse
import logging

import uvicorn

from gateway import vars as config

logger = logging.getLogger("uvicorn.error")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dav-gateway",
        description="Run the generic path proxy or the Nextcloud WebDAV gateway",
    )
    parser.add_argument(
        "variant",
        nargs="?",
        choices=["proxy", "webdav"],
        default="proxy",
        help="Which gateway to serve (default: proxy)",
    )
    parser.add_argument("--host", default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    from gateway.server import APPS

    uv_config = uvicorn.Config(
        APPS[args.variant],
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )
    server = uvicorn.Server(uv_config)
    logger.info(f"Proxy listening on port {args.port}")
    server.run()


if __name__ == "__main__":
    main()
