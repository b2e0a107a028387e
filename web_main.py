"""
Entry point for the pickleharness REST server.

    python web_main.py        ← serves the API on server.host:server.port from config.yaml
"""

from pathlib import Path

import uvicorn

from pickleharness.config import Config, load_config

if __name__ == "__main__":
    cfg_path = Path("config.yaml")
    cfg = load_config(cfg_path) if cfg_path.exists() else Config()
    uvicorn.run(
        "pickleharness.web.app:app",
        host=cfg.server.host,
        port=cfg.server.port,
        reload=True,
    )
