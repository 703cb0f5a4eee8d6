# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for buildvariant tests.

Most tests need a throwaway project tree: a declarations file, sometimes a
credential file. These fixtures build them under tmp_path.
"""

import logging
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from buildvariant.config.schema import ProjectIdentity

MINIMAL_DECLARATIONS = textwrap.dedent("""\
    config_version: "1.0.0"
    log_level: "DEBUG"
    project:
      application_id: "com.example.app"
      version: "1.4.2+17"
      min_platform_version: 24
      target_platform_version: 34
      compile_platform_version: 35
      ndk_version: "27.0.12077973"
""")


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """
    Undo pipeline logging configuration between tests, so handlers bound to
    an old capsys stream don't leak into the next test.
    """
    yield  # type: ignore[misc]
    logger = logging.getLogger("buildvariant")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture()
def project_root(tmp_path: Path) -> Path:
    """A project directory with a minimal valid variants.yaml and no credentials."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "variants.yaml").write_text(MINIMAL_DECLARATIONS, encoding="utf-8")
    return root


@pytest.fixture()
def write_credentials(project_root: Path) -> Callable[[str], Path]:
    """Write key.properties into the project with the given content."""

    def _write(content: str) -> Path:
        path = project_root / "key.properties"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def identity() -> ProjectIdentity:
    return ProjectIdentity(
        application_id="com.example.app",
        version_code=17,
        version_name="1.4.2",
        min_platform_version=24,
        target_platform_version=34,
        compile_platform_version=35,
    )
