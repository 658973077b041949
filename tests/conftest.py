import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'inspect_http' and tests/ importable for helpers.
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from inspect_http.core.config import ServerConfig, clear_config_cache
from inspect_http.core.stdlib_logging import reset_logging_for_tests
from inspect_http.core.web_server import ServerRegistry, reset_registry


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point user config at an empty temp dir and drop leaked INSPECT_HTTP_* overrides."""
    for key in list(os.environ):
        if key.startswith("INSPECT_HTTP_"):
            monkeypatch.delenv(key, raising=False)
    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    monkeypatch.setenv("INSPECT_HTTP_CONFIG_DIR", str(config_dir))
    clear_config_cache()
    yield config_dir
    reset_registry()
    clear_config_cache()
    reset_logging_for_tests()


@pytest.fixture
def loopback_config() -> ServerConfig:
    """Server config that binds 127.0.0.1 so tests never depend on host adapters."""
    return ServerConfig(
        config={
            "inspect_server": {
                "bind_address": "127.0.0.1",
                "probe_timeout_seconds": 2.0,
                "request_timeout_seconds": 5.0,
                "max_body_bytes": 1024,
            }
        }
    )


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<h1>preview</h1>", encoding="utf-8")
    (root / "app.js").write_text("console.log('hi');", encoding="utf-8")
    return root


@pytest.fixture
def registry(loopback_config: ServerConfig):
    reg = ServerRegistry(config=loopback_config)
    yield reg
    for instance in reg.close_all():
        instance.wait_closed(timeout=5.0)
