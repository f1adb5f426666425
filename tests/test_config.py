"""Unit tests for c2c_kit.config.

Tests cover:
- KitConfig defaults (package managers, commit message, bundled templates)
- install_timeout validation
- JSON save/load round trip
- from_env() overrides
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from c2c_kit.config import DEFAULT_TEMPLATES_DIR, KitConfig, SupabaseConfig


@pytest.mark.unit
class TestKitConfigDefaults:
    def test_package_managers(self):
        config = KitConfig()
        assert config.primary_package_manager == "pnpm"
        assert config.fallback_package_manager == "npm"

    def test_install_has_no_timeout_by_default(self):
        assert KitConfig().install_timeout is None

    def test_templates_dir_points_into_package(self):
        assert KitConfig().templates_dir == DEFAULT_TEMPLATES_DIR
        assert DEFAULT_TEMPLATES_DIR.name == "templates"
        assert DEFAULT_TEMPLATES_DIR.parent.name == "c2c_kit"

    def test_working_dir_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert KitConfig().working_dir.resolve() == tmp_path.resolve()

    def test_commit_message(self):
        assert KitConfig().commit_message == "Initial commit from C2C starter kit"

    def test_supabase_defaults(self):
        supabase = SupabaseConfig()
        assert supabase.api_url == "http://localhost:54321"
        assert supabase.studio_url == "http://localhost:54323"
        assert supabase.db_url.endswith("@localhost:54322/postgres")
        assert supabase.types_output == "lib/types/supabase.ts"


@pytest.mark.unit
class TestKitConfigValidation:
    def test_positive_timeout_accepted(self):
        assert KitConfig(install_timeout=300).install_timeout == 300

    @pytest.mark.parametrize("value", [0, -5])
    def test_non_positive_timeout_rejected(self, value):
        with pytest.raises(ValidationError):
            KitConfig(install_timeout=value)

    def test_empty_package_manager_rejected(self):
        with pytest.raises(ValidationError):
            KitConfig(primary_package_manager="")

    def test_health_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            SupabaseConfig(health_timeout=0)


@pytest.mark.unit
class TestKitConfigPersistence:
    def test_save_and_load(self, tmp_path: Path):
        config = KitConfig(
            templates_dir=tmp_path / "tpl",
            working_dir=tmp_path / "work",
            fallback_package_manager="yarn",
            install_timeout=42.5,
        )
        path = config.save(tmp_path / "nested" / "kit.json")

        assert path.exists()
        loaded = KitConfig.load(path)
        assert loaded == config


@pytest.mark.unit
class TestKitConfigFromEnv:
    def test_no_variables_gives_defaults(self, monkeypatch):
        for name in (
            "C2C_TEMPLATES_DIR",
            "C2C_WORKING_DIR",
            "C2C_PACKAGE_MANAGER",
            "C2C_FALLBACK_PACKAGE_MANAGER",
            "C2C_INSTALL_TIMEOUT",
            "C2C_SUPABASE_API_URL",
            "C2C_SUPABASE_STUDIO_URL",
            "C2C_SUPABASE_HEALTH_TIMEOUT",
        ):
            monkeypatch.delenv(name, raising=False)
        config = KitConfig.from_env()
        assert config.primary_package_manager == "pnpm"
        assert config.install_timeout is None

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("C2C_TEMPLATES_DIR", str(tmp_path / "tpl"))
        monkeypatch.setenv("C2C_WORKING_DIR", str(tmp_path))
        monkeypatch.setenv("C2C_PACKAGE_MANAGER", "yarn")
        monkeypatch.setenv("C2C_FALLBACK_PACKAGE_MANAGER", "bun")
        monkeypatch.setenv("C2C_INSTALL_TIMEOUT", "120")
        monkeypatch.setenv("C2C_SUPABASE_STUDIO_URL", "http://studio.test")
        monkeypatch.setenv("C2C_SUPABASE_HEALTH_TIMEOUT", "5")

        config = KitConfig.from_env()

        assert config.templates_dir == tmp_path / "tpl"
        assert config.working_dir == tmp_path
        assert config.primary_package_manager == "yarn"
        assert config.fallback_package_manager == "bun"
        assert config.install_timeout == 120.0
        assert config.supabase.studio_url == "http://studio.test"
        assert config.supabase.health_timeout == 5

    def test_invalid_timeout_raises(self, monkeypatch):
        monkeypatch.setenv("C2C_INSTALL_TIMEOUT", "-1")
        with pytest.raises(ValidationError):
            KitConfig.from_env()
