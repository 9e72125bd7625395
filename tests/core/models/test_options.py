import pytest

from gallery_tree.core.exceptions import FatalConfigurationError
from gallery_tree.core.models import MatchMode, Scope, SecurityAction
from gallery_tree.core.models.options import BuildOptions

DEFAULTS = {
    "depth": 1,
    "max_depth": 4,
    "include_root_container": False,
    "checkbox_mode_enabled": False,
    "root_label_template": "",
    "navigate_url_template": "",
    "required_capabilities": ["VIEW_ALBUM_OR_MEDIA_OBJECT"],
    "match_mode": "any_of",
}


class TestBuildOptions:
    def test_defaults(self):
        options = BuildOptions()
        assert options.depth == 1
        assert options.required_capabilities == SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT
        assert options.single_root_mode is False

    def test_normalisation(self):
        options = BuildOptions(scopes=[Scope(1)], pinned_ids=[3, "4"], navigate_url_template="")
        assert options.scopes == (Scope(1),)
        assert options.pinned_ids == frozenset({3, 4})
        assert options.navigate_url_template is None

    @pytest.mark.parametrize("depth", [0, -1, 1.5, True, "2"])
    def test_invalid_depth(self, depth):
        with pytest.raises(FatalConfigurationError):
            BuildOptions(depth=depth)

    def test_invalid_capabilities(self):
        with pytest.raises(FatalConfigurationError):
            BuildOptions(required_capabilities=SecurityAction(0))

    def test_invalid_root_id(self):
        with pytest.raises(FatalConfigurationError):
            BuildOptions(root_container_id=0)

    def test_include_root_ignored_without_root(self):
        options = BuildOptions(include_root_container=True)
        assert options.single_root_mode is False


class TestFromConfig:
    def test_values_from_defaults(self):
        defaults = dict(DEFAULTS, depth=2, required_capabilities=["EDIT_ALBUM", "add_child_album"],
                        match_mode="ALL_OF")
        options = BuildOptions.from_config(defaults)
        assert options.depth == 2
        assert options.required_capabilities == SecurityAction.EDIT_ALBUM | SecurityAction.ADD_CHILD_ALBUM
        assert options.match_mode is MatchMode.ALL_OF
        assert options.navigate_url_template is None

    def test_overrides_win(self):
        options = BuildOptions.from_config(DEFAULTS, depth=3, root_container_id=5)
        assert options.depth == 3
        assert options.root_container_id == 5

    def test_integer_capabilities(self):
        options = BuildOptions.from_config(dict(DEFAULTS, required_capabilities=6))
        assert options.required_capabilities == SecurityAction.ADD_CHILD_ALBUM | SecurityAction.ADD_MEDIA_OBJECT

    def test_max_depth(self):
        with pytest.raises(FatalConfigurationError):
            BuildOptions.from_config(DEFAULTS, depth=5)

    def test_unknown_override(self):
        with pytest.raises(FatalConfigurationError):
            BuildOptions.from_config(DEFAULTS, colour="red")

    def test_unknown_action_name(self):
        with pytest.raises(FatalConfigurationError):
            BuildOptions.from_config(dict(DEFAULTS, required_capabilities="FLY"))

    def test_unknown_match_mode(self):
        with pytest.raises(FatalConfigurationError):
            BuildOptions.from_config(dict(DEFAULTS, match_mode="some_of"))
