import pytest

from gallery_tree.config import ConfigManager
from gallery_tree.core.exceptions import FatalConfigurationError
from gallery_tree.core.models import SecurityAction
from gallery_tree.core.models.options import BuildOptions


@pytest.fixture
def user_config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("GALLERY_TREE_CONFIG_DIR", str(tmp_path))
    ConfigManager.reset_instance()
    yield tmp_path
    ConfigManager.reset_instance()


class TestConfigManager:
    def test_packaged_defaults(self, user_config_dir):
        defaults = ConfigManager().get_tree_defaults()

        assert defaults["depth"] == 1
        assert defaults["max_depth"] == 10
        assert defaults["required_capabilities"] == ["VIEW_ALBUM_OR_MEDIA_OBJECT"]
        assert ConfigManager().get_logging_config()["version"] == 1

    def test_singleton(self, user_config_dir):
        assert ConfigManager() is ConfigManager()

    def test_user_overrides(self, user_config_dir):
        (user_config_dir / "tree_defaults.yml").write_text("depth: 3\nmax_depth: 4\n", encoding="utf-8")

        defaults = ConfigManager().get_tree_defaults()

        assert defaults["depth"] == 3
        assert defaults["max_depth"] == 4
        assert defaults["match_mode"] == "any_of"

    def test_invalid_user_file_is_ignored(self, user_config_dir):
        (user_config_dir / "tree_defaults.yml").write_text("depth: [unclosed\n", encoding="utf-8")

        assert ConfigManager().get_tree_defaults()["depth"] == 1

    def test_reload(self, user_config_dir):
        manager = ConfigManager()
        (user_config_dir / "tree_defaults.yml").write_text("depth: 2\n", encoding="utf-8")
        assert manager.get_tree_defaults()["depth"] == 1

        manager.reload()

        assert manager.get_tree_defaults()["depth"] == 2


class TestOptionsFromConfigManager:
    def test_from_config_reads_manager(self, user_config_dir):
        (user_config_dir / "tree_defaults.yml").write_text(
            "depth: 2\nrequired_capabilities: [EDIT_ALBUM]\n", encoding="utf-8"
        )

        options = BuildOptions.from_config()

        assert options.depth == 2
        assert options.required_capabilities == SecurityAction.EDIT_ALBUM

    def test_max_depth_from_manager(self, user_config_dir):
        with pytest.raises(FatalConfigurationError):
            BuildOptions.from_config(depth=11)
