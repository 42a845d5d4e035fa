from fastapi import FastAPI

from cipherbox.middleware import EncryptedCookies
from cipherbox.shared import Config, Logger, load_config

logger = Logger(__name__).get_logger()


# ================================================================================
#       FastAPI Setup
# ================================================================================
def create_app(config: Config | None = None) -> FastAPI:
    config = config or load_config()

    app = FastAPI(title=config.general.title)

    app.add_middleware(
        EncryptedCookies,
        key=config.crypto.key,
        cookie_names=config.crypto.cookies,
    )

    return app


app = create_app()


# ================================================================================
#       Command Line
# ================================================================================
def welcome(config: Config):
    # Log server banner
    for line in config.general.title.split("\n"):
        logger.info(line)

    logger.info(
        "Starting server with cookie encryption %s",
        "enabled" if config.crypto.key else "disabled",
    )


def main(argv=None):
    config = load_config()
    welcome(config)

    import uvicorn

    uvicorn.run(
        "cipherbox.main:app",
        host=config.network.host,
        port=config.network.port,
        reload=config.network.reload,
    )


if __name__ == "__main__":
    main()
