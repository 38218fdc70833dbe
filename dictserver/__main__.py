#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""python -m dictserver: run the API with uvicorn on $PORT."""

import structlog
import uvicorn

from .config import DICT_PATH, PORT, SHARDS_ROOT
from .logging_config import configure_logging


def main() -> None:
    configure_logging()
    structlog.get_logger().info("server_starting", port=PORT, dict_path=DICT_PATH, shards_root=SHARDS_ROOT)
    uvicorn.run("dictserver.app:app", host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    main()
