"""
Kernel Boundary & Invariants Contract.

Tests that enforce the kernel's architectural boundaries:

1. editorial_kernel/** may NOT import editorial_services or
   editorial_config. The kernel never depends upward.

2. editorial_kernel/domain/** is pure: no SQLAlchemy, no database
   modules, no logging configuration.

3. The article invariants declaration is complete and non-empty.

These tests read source code via AST and cannot break anything.
"""

import ast
from pathlib import Path

from editorial_kernel.invariants import (
    ALL_ARTICLE_INVARIANTS,
    FORBIDDEN_KERNEL_IMPORTS,
    ArticleInvariant,
)

ROOT = Path(__file__).parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _python_files(package: str) -> list[Path]:
    return sorted((ROOT / package).rglob("*.py"))


def _extract_imports(path: Path) -> list[tuple[int, str]]:
    """Extract (line_number, module_string) for all imports in a file."""
    tree = ast.parse(path.read_text(), filename=str(path))

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for path in _python_files(package):
        for lineno, module in _extract_imports(path):
            for prefix in forbidden:
                if module == prefix or module.startswith(f"{prefix}."):
                    found.append(f"  {path.relative_to(ROOT)}:{lineno} imports '{module}'")
    return found


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestKernelNoUpwardDependencies:

    def test_kernel_files_exist(self):
        assert _python_files("editorial_kernel"), "editorial_kernel not found"

    def test_kernel_does_not_import_forbidden_packages(self):
        violations = _violations("editorial_kernel", FORBIDDEN_KERNEL_IMPORTS)
        assert not violations, (
            "Kernel boundary violation: editorial_kernel/** must not import "
            + ", ".join(FORBIDDEN_KERNEL_IMPORTS) + "\n" + "\n".join(violations)
        )


class TestDomainPurity:

    FORBIDDEN_IN_DOMAIN = (
        "sqlalchemy",
        "editorial_kernel.db",
        "editorial_kernel.models",
        "editorial_kernel.services",
        "editorial_kernel.selectors",
        "editorial_kernel.logging_config",
    )

    def test_domain_has_no_infrastructure_imports(self):
        violations = _violations("editorial_kernel/domain", self.FORBIDDEN_IN_DOMAIN)
        assert not violations, (
            "Domain purity violation:\n" + "\n".join(violations)
        )


class TestInvariantsDeclaration:

    def test_invariants_are_declared(self):
        assert ALL_ARTICLE_INVARIANTS
        assert ALL_ARTICLE_INVARIANTS == frozenset(ArticleInvariant)

    def test_forbidden_imports_cover_upper_layers(self):
        assert set(FORBIDDEN_KERNEL_IMPORTS) == {"editorial_services", "editorial_config"}
