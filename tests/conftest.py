"""Shared fixtures: a small blog site snapshot."""

import copy
import json

import pytest

from pw_studio.codegen.languages.php import PhpSnippetGenerator
from pw_studio.snapshot import SiteSnapshot


def _field(id, name, type, label="", **extra):
    data = {"id": id, "name": name, "type": type, "label": label or name.title()}
    data.update(extra)
    return data


BLOG_POST_FIELDS = [
    _field(1, "title", "FieldtypePageTitle", "Title", required=True),
    _field(2, "date", "FieldtypeDatetime", "Date"),
    _field(3, "summary", "FieldtypeTextarea", "Summary", description="Short teaser"),
    _field(4, "body", "FieldtypeTextarea", "Body", contentType=1),
    _field(5, "images", "FieldtypeImage", "Images", maxFiles=0),
    _field(6, "hero", "FieldtypeImage", "Hero image", maxFiles=1),
    _field(7, "tags", "FieldtypePage", "Tags", derefAsPage=0),
    _field(8, "author", "FieldtypePage", "Author", derefAsPage=1),
    _field(9, "gallery", "FieldtypeRepeater", "Gallery", repeaterTemplate="repeater_gallery"),
    _field(10, "price", "FieldtypeFloat", "Price"),
    _field(11, "views", "FieldtypeInteger", "Views"),
    _field(12, "featured", "FieldtypeCheckbox", "Featured"),
    _field(13, "website", "FieldtypeURL", "Website"),
    _field(14, "contact", "FieldtypeEmail", "Contact"),
    _field(15, "category", "FieldtypeOptions", "Category"),
    _field(16, "rating", "FieldtypeStars", "Rating"),
]

SITE = {
    "templates": [
        {"id": 1, "name": "admin", "label": "Admin", "system": True, "fields": []},
        {"id": 2, "name": "home", "label": "Home", "fields": [_field(1, "title", "FieldtypePageTitle")]},
        {
            "id": 10,
            "name": "blog",
            "label": "Blog",
            "childTemplates": ["blog-post"],
            "fields": [_field(1, "title", "FieldtypePageTitle")],
        },
        {"id": 11, "name": "blog-post", "label": "Blog Post", "fields": BLOG_POST_FIELDS},
        {
            "id": 12,
            "name": "repeater_gallery",
            "system": True,
            "fields": [
                _field(30, "caption", "FieldtypeText", "Caption"),
                _field(31, "photo", "FieldtypeImage", "Photo", maxFiles=1),
                _field(32, "slides", "FieldtypeRepeater", "Slides", repeaterTemplate="repeater_slides"),
            ],
        },
        {
            "id": 13,
            "name": "repeater_slides",
            "system": True,
            "fields": [_field(33, "heading", "FieldtypeText", "Heading")],
        },
        {
            "id": 14,
            "name": "event",
            "label": "event",
            "fields": [
                _field(1, "title", "FieldtypePageTitle"),
                _field(2, "date", "FieldtypeDatetime"),
                _field(20, "location", "FieldtypeText"),
                _field(3, "summary", "FieldtypeTextarea"),
            ],
        },
        {
            "id": 15,
            "name": "calendar",
            "label": "Calendar",
            "childTemplates": ["event", "missing-template"],
            "fields": [_field(1, "title", "FieldtypePageTitle")],
        },
        {"id": 16, "name": "tag", "label": "Tag", "fields": [_field(1, "title", "FieldtypePageTitle")]},
    ],
    "pages": [
        {"id": 1, "name": "home", "title": "Home", "template": "home", "parent": 0, "url": "/"},
        {"id": 1001, "name": "blog", "title": "Blog", "template": "blog", "parent": 1, "url": "/blog/"},
        {
            "id": 2001,
            "name": "alpha",
            "title": "Alpha Coffee",
            "template": "blog-post",
            "parent": 1001,
            "url": "/blog/alpha/",
            "fields": {
                "date": "2024-01-15",
                "summary": "Morning brew notes",
                "tags": [3001, 3002],
                "author": 3002,
                "views": 12,
                "featured": True,
            },
        },
        {
            "id": 2002,
            "name": "beta",
            "title": "Beta Tea",
            "template": "blog-post",
            "parent": 1001,
            "url": "/blog/beta/",
            "fields": {
                "date": "2024-03-01",
                "summary": "Green and black",
                "tags": [3002],
                "views": 40,
                "featured": False,
            },
        },
        {
            "id": 2003,
            "name": "gamma",
            "title": "Gamma Coffee Beans",
            "template": "blog-post",
            "parent": 1001,
            "url": "/blog/gamma/",
            "fields": {
                "date": "2023-12-24",
                "summary": "Roasting at home",
                "tags": [3001, 9999],
                "views": 7,
            },
        },
        {"id": 1002, "name": "calendar", "title": "Calendar", "template": "calendar", "parent": 1},
        {"id": 3001, "name": "coffee", "title": "Coffee", "template": "tag", "parent": 1},
        {"id": 3002, "name": "travel", "title": "Travel", "template": "tag", "parent": 1},
    ],
    "settings": {
        "dataPageListerTemplates": ["blog", "calendar"],
        "dataPageListerConfigs": {
            "blog": {"mode": "auto", "numFields": 3, "fieldSelectionMode": "firstN", "fields": ""}
        },
        "dataPageListerPageSize": 50,
        "enableMinification": True,
    },
}


@pytest.fixture
def site_data():
    """Raw site document (a fresh copy per test)."""
    return copy.deepcopy(SITE)


@pytest.fixture
def snapshot(site_data):
    """In-memory site built from the sample document."""
    return SiteSnapshot.from_dict(site_data, source="test-site")


@pytest.fixture
def site_file(tmp_path, site_data):
    """Sample document written to a JSON file."""
    path = tmp_path / "site.json"
    path.write_text(json.dumps(site_data), encoding="utf-8")
    return path


@pytest.fixture
def blog_post(snapshot):
    return snapshot.get_template("blog-post")


@pytest.fixture
def generator(snapshot):
    """PHP generator with default configuration, resolving repeaters via the site."""
    return PhpSnippetGenerator(schema=snapshot)
