import uvicorn

from bill_analyzer.api.app import create_app
from bill_analyzer.config.api_key import ensure_api_key_configured
from bill_analyzer.config.settings import Settings
from bill_analyzer.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> check API key -> build app -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)
    ensure_api_key_configured(settings)

    app = create_app(settings)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level="info")


if __name__ == "__main__":
    main()
