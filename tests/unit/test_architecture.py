"""Tests to verify hexagonal architecture structure."""

from pathlib import Path

import pytest

# Compute project root relative to this test file
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def package_path() -> Path:
    """Return the peer_verification package directory."""
    return PROJECT_ROOT / "peer_verification"


def _imports_of(py_file: Path) -> list[str]:
    return [
        line.strip()
        for line in py_file.read_text().splitlines()
        if line.strip().startswith(("from peer_verification", "import peer_verification"))
    ]


def test_main_layers_exist(package_path: Path) -> None:
    """Verify all main layer directories exist."""
    for layer in ["domain", "application", "infrastructure", "api", "bootstrap", "config"]:
        assert (package_path / layer / "__init__.py").is_file(), f"Missing layer: {layer}"


def test_domain_has_no_external_layer_imports(package_path: Path) -> None:
    """Domain is the innermost layer and imports only itself."""
    for py_file in (package_path / "domain").rglob("*.py"):
        for line in _imports_of(py_file):
            assert "peer_verification.domain" in line, (
                f"{py_file} contains forbidden import: {line}"
            )


def test_application_does_not_import_outer_layers(package_path: Path) -> None:
    forbidden = ("peer_verification.api", "peer_verification.bootstrap")
    for py_file in (package_path / "application").rglob("*.py"):
        for line in _imports_of(py_file):
            assert not any(f in line for f in forbidden), (
                f"{py_file} contains forbidden import: {line}"
            )


def test_ports_are_only_implemented_in_infrastructure(package_path: Path) -> None:
    """Stubs and adapters live in infrastructure, never in application."""
    services = package_path / "application" / "services"
    for py_file in services.rglob("*.py"):
        for line in _imports_of(py_file):
            assert "infrastructure.stubs" not in line
            assert "infrastructure.adapters" not in line, (
                f"{py_file} depends on a concrete adapter: {line}"
            )
