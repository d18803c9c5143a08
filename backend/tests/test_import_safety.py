"""
test_import_safety.py — Import and purity checks for the compliance engine.

Verifies that:
  1. Every engine, model and ambient module imports cleanly without a
     running server.
  2. The engine modules stay pure: no HTTP framework imports and no hidden
     system-clock reads (``today`` is always injected by the caller).
  3. Rule modules do not import the builder, filter or summary modules
     (dependency order runs leaves first).

No database, network, or external services are required.
"""

import importlib
import inspect

import pytest

_ENGINE_MODULES = [
    "app.services.compliance_rules",
    "app.services.compliance_engine",
    "app.services.compliance_filters",
    "app.services.compliance_summary",
]

_SUPPORT_MODULES = [
    "app.config",
    "app.models.compliance_schema",
    "app.services.perf_monitor",
    "app.services.logging_config",
    "app.services.middleware",
    "app.api.compliance_routes",
]


class TestModuleImports:

    @pytest.mark.parametrize("module_path", _ENGINE_MODULES + _SUPPORT_MODULES)
    def test_module_imports(self, module_path):
        mod = importlib.import_module(module_path)
        assert mod is not None, f"Module {module_path} is None after import"


class TestEnginePurity:

    @pytest.mark.parametrize("module_path", _ENGINE_MODULES)
    def test_no_http_framework(self, module_path):
        src = inspect.getsource(importlib.import_module(module_path))
        assert "fastapi" not in src, f"{module_path} must not depend on the HTTP layer"
        assert "starlette" not in src, f"{module_path} must not depend on the HTTP layer"

    @pytest.mark.parametrize("module_path", _ENGINE_MODULES)
    def test_no_system_clock(self, module_path):
        src = inspect.getsource(importlib.import_module(module_path))
        for call in ("date.today(", "datetime.now(", "datetime.utcnow("):
            assert call not in src, f"{module_path} reads the clock via {call}; inject today instead"


class TestDependencyOrder:

    def test_rules_do_not_import_builder(self):
        import app.services.compliance_rules as rules
        src = inspect.getsource(rules)
        for name in ("compliance_engine", "compliance_filters", "compliance_summary"):
            assert name not in src, f"compliance_rules must not import {name}"

    def test_builder_does_not_import_filters_or_summary(self):
        import app.services.compliance_engine as engine
        src = inspect.getsource(engine)
        assert "compliance_filters" not in src
        assert "compliance_summary" not in src
