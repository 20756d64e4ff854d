# run_sizer_server.py
import argparse
import logging

import uvicorn

from cluster_sizer.config import load_settings

# Настраиваем логирование для лаунчера
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("launcher")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Cluster Sizer Server Launcher")

    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")

    args = parser.parse_args()

    # Проверяем настройки до старта, чтобы ошибка в SIZER_* была видна сразу
    settings = load_settings()
    log.info(
        "Starting with max_worker_nodes=%d, control_plane_policy=%s",
        settings.max_worker_nodes,
        settings.control_plane_policy,
    )

    uvicorn.run(
        "cluster_sizer.api.server:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
    )
