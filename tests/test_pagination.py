"""
Unit tests for pagination controls, widgets and page titles.
"""

import pytest
from bucket_page.pagination import (
    PAGE_SIZES,
    PagingState,
    get_page_links,
    get_paging_links
)
from bucket_page.utils.messages import MessageResolver
from bucket_page.utils.title import Title
from bucket_page.widgets import ButtonWidget, ButtonGroupWidget

BASE = "/index.php?title=Special:Bucket"


class TestTitle:
    """Test Title normalisation and URLs."""

    def test_normalised(self):
        """Test spaces and first letter are normalised."""
        title = Title(" main page ")
        assert title.db_key == "Main_page"
        assert title.text == "Main page"

    def test_local_url(self):
        """Test query parameters are appended in order."""
        url = Title("Special:Bucket").get_local_url({'limit': 20, 'offset': 0})
        assert url == BASE + "&limit=20&offset=0"

    def test_local_url_without_query(self):
        """Test URL without parameters."""
        assert Title("Special:Bucket").get_local_url() == BASE

    def test_local_url_skips_empty_values(self):
        """Test None and False are dropped and True becomes 1."""
        url = Title("Main page").get_local_url({'a': None, 'b': False, 'c': True})
        assert url == "/index.php?title=Main_page&c=1"

    def test_local_url_encodes(self):
        """Test parameter values are URL encoded."""
        url = Title("Special:Bucket").get_local_url({'where': '{"a": 1}'})
        assert "where=%7B%22a%22%3A+1%7D" in url

    def test_script_path(self):
        """Test a custom script path."""
        assert Title("Foo", script_path="/w/index.php").get_local_url() == "/w/index.php?title=Foo"

    def test_equality(self):
        """Test titles compare by normalised key."""
        assert Title("special:Bucket") == Title("Special:Bucket")
        assert Title("Foo") != Title("Bar")


class TestPageLinks:
    """Test the previous / page size / next button row."""

    def setup_method(self):
        """Set up the special page title."""
        self.title = Title("Special:Bucket")

    def test_button_order(self):
        """Test previous, one button per size, then next."""
        links = get_page_links(self.title, 20, 0, {})
        assert isinstance(links, ButtonGroupWidget)
        assert len(links) == len(PAGE_SIZES) + 2
        labels = [item.label for item in links]
        assert labels == ["Previous 20", "20", "50", "100", "250", "500", "Next 20"]

    def test_previous_disabled_at_start(self):
        """Test previous is disabled at offset 0."""
        links = get_page_links(self.title, 20, 0, {})
        assert links.items[0].disabled
        assert not links.items[-1].disabled

    def test_previous_enabled_after_start(self):
        """Test previous is enabled past the first page."""
        links = get_page_links(self.title, 20, 40, {})
        assert not links.items[0].disabled
        assert links.items[0].href == BASE + "&limit=20&offset=20"

    def test_next_disabled_without_more(self):
        """Test next is disabled when there is no next page."""
        links = get_page_links(self.title, 20, 0, {}, has_next=False)
        assert links.items[-1].disabled

    def test_next_offset(self):
        """Test next moves forward by one page."""
        links = get_page_links(self.title, 50, 100, {})
        assert links.items[-1].href == BASE + "&limit=50&offset=150"

    @pytest.mark.parametrize("limit,offset", [(20, 0), (20, 10), (50, 20), (0, 0), (500, 499)])
    def test_previous_offset_never_negative(self, limit, offset):
        """Test previous target offset is clamped to zero."""
        links = get_page_links(self.title, limit, offset, {})
        expected = max(0, offset - limit)
        assert links.items[0].href == BASE + f"&limit={limit}&offset={expected}"
        assert "offset=-" not in links.items[0].href

    def test_size_buttons(self):
        """Test size buttons keep the offset and mark the current size."""
        links = get_page_links(self.title, 50, 100, {})
        sizes = links.items[1:-1]
        assert [b.href for b in sizes] == [
            BASE + f"&limit={num}&offset=100" for num in PAGE_SIZES
        ]
        assert [b.active for b in sizes] == [False, True, False, False, False]
        assert sizes[0].title == "Show 20 results per page."

    def test_no_active_size_for_custom_limit(self):
        """Test no size is active for a limit outside the options."""
        links = get_page_links(self.title, 30, 0, {})
        assert not any(b.active for b in links.items[1:-1])

    def test_tooltips(self):
        """Test previous and next tooltips come from messages."""
        links = get_page_links(self.title, 20, 0, {})
        assert links.items[0].title == "See previous 20 results"
        assert links.items[-1].title == "See next 20 results"

    def test_extra_query_preserved(self):
        """Test extra parameters are carried on every link."""
        links = get_page_links(self.title, 20, 20, {'bucket': 'exchange', 'select': 'item'})
        for item in links:
            assert item.href.endswith("&bucket=exchange&select=item")

    def test_limit_and_offset_override_extras(self):
        """Test limit/offset in extra parameters do not leak into links."""
        links = get_page_links(self.title, 20, 40, {'limit': 999, 'offset': 7, 'bucket': 'x'})
        assert links.items[0].href == BASE + "&limit=20&offset=20&bucket=x"
        assert links.items[-1].href == BASE + "&limit=20&offset=60&bucket=x"
        assert all("999" not in item.href for item in links)

    def test_links_built_independently(self):
        """Test no link inherits parameters of an earlier link."""
        links = get_page_links(self.title, 100, 0, {'bucket': 'x'})
        assert links.items[-1].href == BASE + "&limit=100&offset=100&bucket=x"
        assert links.items[1].href == BASE + "&limit=20&offset=0&bucket=x"

    def test_query_not_mutated(self):
        """Test the caller's parameters are left untouched."""
        query = {'bucket': 'exchange'}
        get_page_links(self.title, 20, 0, query)
        assert query == {'bucket': 'exchange'}

    def test_custom_messages(self):
        """Test labels use the injected message resolver."""
        messages = MessageResolver({'bucket-previous': 'Zurück', 'bucket-next': 'Weiter'})
        links = get_page_links(self.title, 20, 0, {}, messages=messages)
        assert links.items[0].label == "Zurück 20"
        assert links.items[-1].label == "Weiter 20"

    def test_paging_state(self):
        """Test building links from a PagingState."""
        state = PagingState(limit=50, offset=100, query={'bucket': 'x'}, has_next=False)
        links = get_paging_links(self.title, state)
        assert links.items[0].href == BASE + "&limit=50&offset=50&bucket=x"
        assert links.items[-1].disabled
        assert links.items[2].active

    def test_paging_state_is_frozen(self):
        """Test PagingState is read-only."""
        state = PagingState(limit=20, offset=0)
        with pytest.raises(AttributeError):
            state.offset = 20


class TestWidgets:
    """Test widget HTML rendering."""

    def test_enabled_button(self):
        """Test an enabled button links to its target."""
        html = str(ButtonWidget(href="/index.php?title=A&limit=20", title="Go", label="Next"))
        assert 'href="/index.php?title=A&amp;limit=20"' in html
        assert 'title="Go"' in html
        assert '<span class="oo-ui-labelElement-label">Next</span>' in html
        assert 'oo-ui-widget-enabled' in html

    def test_disabled_button(self):
        """Test a disabled button has no link target."""
        html = str(ButtonWidget(href="/x", label="Prev", disabled=True))
        assert 'aria-disabled="true"' in html
        assert 'href=' not in html
        assert 'oo-ui-widget-disabled' in html

    def test_active_button(self):
        """Test the active class."""
        assert 'oo-ui-buttonElement-active' in str(ButtonWidget(href="/x", label=20, active=True))
        assert 'oo-ui-buttonElement-active' not in str(ButtonWidget(href="/x", label=20))

    def test_attributes_escaped(self):
        """Test titles and labels are HTML escaped."""
        html = str(ButtonWidget(href="/x", title='a"b', label="<i>"))
        assert 'title="a&#34;b"' in html
        assert '&lt;i&gt;' in html
        assert '<i>' not in html

    def test_group(self):
        """Test a group renders its items in order."""
        group = ButtonGroupWidget([ButtonWidget(href="/a", label="A"), ButtonWidget(href="/b", label="B")])
        html = str(group)
        assert html.startswith('<div class="oo-ui-widget oo-ui-widget-enabled oo-ui-buttonGroupWidget">')
        assert html.endswith('</div>')
        assert html.index('href="/a"') < html.index('href="/b"')

    def test_html_protocol(self):
        """Test widgets expose __html__ for templates."""
        button = ButtonWidget(href="/a", label="A")
        assert button.__html__() == str(button.to_html())
