from __future__ import annotations

from pathlib import Path

from setuptools import find_packages

ROOT = Path(__file__).resolve().parent.parent


def test_every_portal_package_is_installed() -> None:
    found = set(find_packages(where=str(ROOT), include=["portal*"]))
    assert {"portal", "portal.models", "portal.routers", "portal.schemas", "portal.services"} <= found
