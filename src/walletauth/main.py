"""Application entry point for the wallet auth server."""

from walletauth.app import App
from walletauth.config import Config
from walletauth.logging import setup_logging
from walletauth.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
