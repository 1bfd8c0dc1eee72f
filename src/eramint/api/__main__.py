# src/eramint/api/__main__.py
from __future__ import annotations

import uvicorn

from eramint.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so ERAMINT_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from eramint.api.app import create_app
    from eramint.api.structured_logging import configure_structured_logging
    from eramint.runtime.mint_config import apply_mint_config_to_env, load_mint_config

    cfg = load_mint_config()
    apply_mint_config_to_env(cfg)
    configure_structured_logging(cfg.log_level)

    uvicorn.run(create_app(), host=cfg.api_host, port=int(cfg.api_port), log_level=cfg.log_level.lower())


if __name__ == "__main__":
    main()
