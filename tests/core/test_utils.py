from gallery_tree.core.utils import add_query_parameter, expand_navigate_url, expand_root_label


class TestAddQueryParameter:
    """Test cases for add_query_parameter function."""

    def test_adds_to_bare_path(self):
        assert add_query_parameter("/gallery.aspx", "aid", "5") == "/gallery.aspx?aid=5"

    def test_keeps_existing_parameters_and_fragment(self):
        url = add_query_parameter("/gallery.aspx?g=1#top", "aid", "5")
        assert url == "/gallery.aspx?g=1&aid=5#top"

    def test_replaces_parameter_of_same_name(self):
        assert add_query_parameter("/g.aspx?aid=1&x=2", "aid", "7") == "/g.aspx?x=2&aid=7"

    def test_absolute_url(self):
        assert add_query_parameter("https://example.com/a?b=", "aid", "3") == "https://example.com/a?b=&aid=3"


class TestExpandNavigateUrl:
    """Test cases for expand_navigate_url function."""

    def test_empty_template_means_no_link(self):
        assert expand_navigate_url(None, 1) is None
        assert expand_navigate_url("", 1) is None

    def test_container_id_token(self):
        assert expand_navigate_url("/albums/{ContainerId}/view", 12) == "/albums/12/view"

    def test_query_parameter_without_token(self):
        assert expand_navigate_url("/default.aspx?g=task", 12) == "/default.aspx?g=task&aid=12"


class TestExpandRootLabel:
    """Test cases for expand_root_label function."""

    def test_tokens(self):
        assert expand_root_label("{ScopeDescription} #{ScopeId} - ", 3, "Travel") == "Travel #3 - "

    def test_empty_template(self):
        assert expand_root_label("", 3, "Travel") == ""

    def test_missing_description(self):
        assert expand_root_label("[{ScopeDescription}] ", 3, None) == "[] "
