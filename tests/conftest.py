"""
    Copyright 2024 Inmanta

    Licensed under the Apache License, Version 2.0 (the "License");
    you may not use this file except in compliance with the License.
    You may obtain a copy of the License at

        http://www.apache.org/licenses/LICENSE-2.0

    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Contact: code@inmanta.com
"""

import os

import pytest

from netalloc import config
from netalloc.registry import VlanDB


@pytest.fixture(autouse=True)
def clean_reset(monkeypatch: pytest.MonkeyPatch, tmpdir) -> None:
    """
    Make sure no config file or environment variable of the machine running the tests leaks into the config.
    """
    for name in list(os.environ):
        if name.startswith("NETALLOC_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmpdir))
    monkeypatch.chdir(tmpdir)
    config.Config._reset()
    yield
    config.Config._reset()


@pytest.fixture
def vlan_db() -> VlanDB:
    return VlanDB()
