"""Run the provider discovery API with uvicorn."""

from __future__ import annotations

import uvicorn

from provider_search.api.api_config import get_api_config


def main() -> None:
    config = get_api_config()
    uvicorn.run("provider_search.api.app:app", host=config.host, port=config.port, reload=False)


if __name__ == "__main__":
    main()
