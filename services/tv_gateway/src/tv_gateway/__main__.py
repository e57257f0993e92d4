from __future__ import annotations
from core_utils.bootstrap import ensure_monorepo_paths
ensure_monorepo_paths()
from core_utils.uvicorn_entry import run
from core_config import get_settings


def main() -> None:
    run("tv_gateway.app:create_app", get_settings().port, factory=True)


if __name__ == "__main__":
    main()
