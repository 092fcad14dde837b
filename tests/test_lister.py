"""Tests for the Data Page Lister."""

import pytest

from pw_studio.codegen.core.schema import FieldDescriptor, FieldKind, TemplateDescriptor
from pw_studio.host import PageNode
from pw_studio.lister import DataPageLister
from pw_studio.settings import ListerConfig, StudioSettings


def make_lister(snapshot, **settings):
    if settings:
        return DataPageLister(snapshot, snapshot, settings=StudioSettings(**settings))
    return DataPageLister(snapshot, snapshot, config=snapshot)


def text_template(name, *field_names):
    return TemplateDescriptor(
        name=name, fields=tuple(FieldDescriptor(n, FieldKind.TEXT) for n in field_names)
    )


class TestContainerDetection:
    def test_enabled_template_is_container(self, snapshot):
        lister = make_lister(snapshot)
        assert lister.is_data_container(snapshot.get_page(1001)) is True

    def test_children_alone_do_not_make_a_container(self, snapshot):
        """Home has children but is not on the allow-list."""
        lister = make_lister(snapshot)
        assert lister.is_data_container(snapshot.get_page(1)) is False
        assert lister.is_data_container(None) is False

    def test_settings_are_read_on_every_access(self, snapshot):
        lister = make_lister(snapshot)
        assert lister.is_data_container(snapshot.get_page(1)) is False
        blob = snapshot.get_config()
        blob["dataPageListerTemplates"].append("home")
        snapshot.save_config(blob)
        assert lister.is_data_container(snapshot.get_page(1)) is True


class TestChildTemplates:
    def test_from_existing_children(self, snapshot):
        lister = make_lister(snapshot)
        names = [t.name for t in lister.child_templates(snapshot.get_page(1001))]
        assert names == ["blog-post"]

    def test_first_seen_order_without_duplicates(self, snapshot):
        names = [t.name for t in make_lister(snapshot).child_templates(snapshot.get_page(1))]
        assert names == ["blog", "calendar", "tag"]

    def test_fallback_to_allowed_child_templates(self, snapshot):
        """An empty container uses its template's allowed children; unknown names are skipped."""
        names = [t.name for t in make_lister(snapshot).child_templates(snapshot.get_page(1002))]
        assert names == ["event"]

    def test_no_children_and_no_allowed_templates(self, snapshot):
        assert make_lister(snapshot).child_templates(snapshot.get_page(3001)) == []


class TestFieldSelection:
    def test_allowed_fields_skip_system_and_complex_kinds(self, snapshot, blog_post):
        assert make_lister(snapshot).allowed_field_names(blog_post) == [
            "date",
            "summary",
            "body",
            "tags",
            "author",
            "price",
            "views",
            "featured",
            "website",
            "contact",
            "category",
        ]

    def test_auto_mode_takes_first_n(self, snapshot, blog_post):
        lister = make_lister(snapshot)
        fields = lister.select_display_fields(snapshot.get_page(1001), [blog_post])
        assert fields == ["date", "summary", "body"]

    def test_default_config(self, snapshot, blog_post):
        """Without a stored config the first five allowed fields are shown."""
        lister = make_lister(snapshot, lister_templates=["blog"])
        fields = lister.select_display_fields(snapshot.get_page(1001), [blog_post])
        assert fields == ["date", "summary", "body", "tags", "author"]

    def test_manual_mode_keeps_configured_order(self, snapshot, blog_post):
        lister = make_lister(
            snapshot,
            lister_templates=["blog"],
            lister_configs={"blog": ListerConfig(mode="manual", fields="views, date, ghost, gallery, tags")},
        )
        fields = lister.select_display_fields(snapshot.get_page(1001), [blog_post])
        assert fields == ["views", "date", "tags"]

    def test_manual_mode_drops_unknown_names(self, snapshot, blog_post):
        lister = make_lister(
            snapshot,
            lister_templates=["blog"],
            lister_configs={"blog": ListerConfig(mode="manual", fields="date, summary, ghost, tags")},
        )
        fields = lister.select_display_fields(snapshot.get_page(1001), [blog_post])
        assert fields == ["date", "summary", "tags"]

    def test_manual_mode_without_valid_names_falls_back(self, snapshot, blog_post):
        lister = make_lister(
            snapshot,
            lister_templates=["blog"],
            lister_configs={"blog": ListerConfig(mode="manual", num_fields=2, fields="ghost, gallery")},
        )
        fields = lister.select_display_fields(snapshot.get_page(1001), [blog_post])
        assert fields == ["date", "summary"]

    def test_common_mode_intersects_in_first_template_order(self, snapshot):
        lister = make_lister(
            snapshot,
            lister_templates=["box"],
            lister_configs={"box": ListerConfig(field_selection_mode="common")},
        )
        parent = PageNode(id=1, template="box")
        templates = [text_template("one", "a", "b", "c"), text_template("two", "d", "c", "b")]
        assert lister.select_display_fields(parent, templates) == ["b", "c"]

    def test_common_mode_with_one_template_is_first_n(self, snapshot, blog_post):
        lister = make_lister(
            snapshot,
            lister_templates=["blog"],
            lister_configs={"blog": ListerConfig(field_selection_mode="common", num_fields=1)},
        )
        assert lister.select_display_fields(snapshot.get_page(1001), [blog_post]) == ["date"]

    def test_no_templates_no_fields(self, snapshot):
        assert make_lister(snapshot).select_display_fields(snapshot.get_page(1001), []) == []


class TestOverview:
    def test_first_page(self, snapshot):
        lister = make_lister(snapshot, lister_templates=["blog"], page_size=2)
        overview = lister.overview(snapshot.get_page(1001))

        assert overview.fields == ["date", "summary", "body", "tags", "author"]
        assert [p.title for p in overview.items] == ["Alpha Coffee", "Beta Tea"]
        assert overview.total == 3
        assert overview.pages == 2
        assert overview.pager == [1, 2]
        assert overview.selector == "parent=1001, sort=title asc"
        assert overview.active.is_empty
        assert overview.allowed[0] == "title"

    def test_second_page(self, snapshot):
        lister = make_lister(snapshot, lister_templates=["blog"], page_size=2)
        overview = lister.overview(snapshot.get_page(1001), {"pg": "2"})
        assert [p.title for p in overview.items] == ["Gamma Coffee Beans"]
        assert overview.start == 2

    def test_filtered_and_sorted(self, snapshot):
        lister = make_lister(snapshot)
        overview = lister.overview(
            snapshot.get_page(1001), {"q": "coffee", "by": "title", "sort": "date", "dir": "DESC"}
        )
        assert [p.title for p in overview.items] == ["Alpha Coffee", "Gamma Coffee Beans"]
        assert overview.active.to_dict() == {"q": "coffee", "by": "title"}
        assert overview.pager == []

    def test_filter_on_display_field(self, snapshot):
        overview = make_lister(snapshot).overview(
            snapshot.get_page(1001), {"q": "green", "by": "summary"}
        )
        assert [p.title for p in overview.items] == ["Beta Tea"]

    def test_settings_flags(self, snapshot):
        lister = make_lister(snapshot, lister_templates=["blog"], show_help=False, show_view=True)
        overview = lister.overview(snapshot.get_page(1001))
        assert overview.show_help is False
        assert overview.show_view is True

    def test_zero_page_size_still_lists(self, snapshot):
        lister = make_lister(snapshot, lister_templates=["blog"], page_size=0)
        overview = lister.overview(snapshot.get_page(1001))
        assert overview.limit == 1
        assert len(overview.items) == 1

    @pytest.mark.parametrize("page_id", [1, 3001])
    def test_not_a_container(self, snapshot, page_id):
        assert make_lister(snapshot).overview(snapshot.get_page(page_id)) is None

    def test_empty_container_lists_nothing(self, snapshot):
        overview = make_lister(snapshot).overview(snapshot.get_page(1002))
        assert overview.items == []
        assert overview.total == 0
        assert overview.fields == ["date", "location", "summary"]
