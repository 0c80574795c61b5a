# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the conftest unit so this responsibility stays isolated, testable, and easy to evolve."""

import os
import tempfile
import pytest
from pathlib import Path

_ISOLATED_VARS = (
    "OPENROUTER_API",
    "OPENROUTER_BASE_URL",
    "OPENROUTER_TIMEOUT_S",
    "HCK_APP_URL",
    "HCK_APP_TITLE",
    "HCK_LLM_DUMP",
    "HCK_LLM_DUMP_PATH",
    "HCK_LLM_DEBUG",
)


@pytest.fixture(scope="session", autouse=True)
def session_temp_env():
    # Point config at an empty temp dir so a developer's machine.json or
    # exported credentials never reach the tests.
    temp_dir = tempfile.TemporaryDirectory(prefix="hck_test_session_")
    config_dir = Path(temp_dir.name) / "config"
    config_dir.mkdir(parents=True, exist_ok=True)

    originals = {name: os.environ.pop(name, None) for name in _ISOLATED_VARS}
    orig_config_dir = os.environ.get("HCK_CONFIG_DIR")
    os.environ["HCK_CONFIG_DIR"] = str(config_dir)

    yield

    temp_dir.cleanup()

    for name, value in originals.items():
        if value is not None:
            os.environ[name] = value
    if orig_config_dir is not None:
        os.environ["HCK_CONFIG_DIR"] = orig_config_dir
    else:
        os.environ.pop("HCK_CONFIG_DIR", None)
