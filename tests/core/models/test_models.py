import pytest

from gallery_tree.core.models import (
    ALL_SECURITY_ACTIONS,
    Container,
    ContainerKind,
    LoadResult,
    Role,
    SecurityAction,
    Subject,
)


class TestSecurityAction:
    def test_split(self):
        combined = SecurityAction.EDIT_ALBUM | SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT
        assert combined.split() == [SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT, SecurityAction.EDIT_ALBUM]

    @pytest.mark.parametrize("value, expected", [(1, True), (6, True), (8191, True), (0, False), (8192, False)])
    def test_is_valid(self, value, expected):
        assert SecurityAction.is_valid(value) is expected

    def test_all_actions(self):
        assert int(ALL_SECURITY_ACTIONS) == 8191

    def test_from_names(self):
        assert SecurityAction.from_names([" edit_album", "ADD_CHILD_ALBUM"]) == 10
        with pytest.raises(KeyError):
            SecurityAction.from_names(["FLY"])


class TestValueObjects:
    def test_container_flags(self):
        top = Container(1, 1, "Top")
        virtual = Container(2, 1, "Results", parent_id=1, kind=ContainerKind.VIRTUAL)
        assert top.is_top and not top.is_virtual
        assert virtual.is_virtual and not virtual.is_top

    def test_subject(self):
        assert not Subject.anonymous().is_authenticated
        assert Subject("ann").is_authenticated

    def test_role_allows(self):
        role = Role("Editors", SecurityAction.EDIT_ALBUM | SecurityAction.DELETE_ALBUM)
        assert role.allows(SecurityAction.DELETE_ALBUM)
        assert not role.allows(SecurityAction.SYNCHRONIZE)

    def test_load_result(self):
        assert LoadResult(container=Container(1, 1, "x")).ok
        assert not LoadResult().ok
