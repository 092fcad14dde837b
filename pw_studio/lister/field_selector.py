"""
Data Page Lister.

Decides which pages are data containers, which templates their children use
and which fields the child table shows, then assembles one page of the
listing. Every lookup failure degrades to an empty or default result.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from ..codegen.core.schema import DISPLAY_SAFE_KINDS, SYSTEM_FIELD_NAMES, TemplateDescriptor
from ..host import ConfigStore, ContentStore, PageNode, SchemaProvider
from ..logging_config import get_logger
from ..settings import DEFAULT_NUM_FIELDS, ListerConfig, StudioSettings
from .filter import ActiveFilterState, build_query
from .pagination import PagerItem, page_count, page_number, page_start, page_window

logger = get_logger(__name__)

# Children inspected when looking for the templates in use
CHILD_SAMPLE_SIZE = 10


@dataclass
class ListerOverview:
    """One page of a container's child listing."""

    parent: PageNode
    fields: List[str]
    items: List[PageNode]
    total: int
    page_num: int
    limit: int
    selector: str
    active: ActiveFilterState
    allowed: List[str]
    child_templates: List[TemplateDescriptor]
    pager: List[PagerItem] = field(default_factory=list)
    show_help: bool = True
    show_view: bool = False

    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)

    @property
    def start(self) -> int:
        return page_start(self.page_num, self.limit)


class DataPageLister:
    """Field selection and listing for configured container pages."""

    def __init__(
        self,
        schema: SchemaProvider,
        content: ContentStore,
        config: Optional[ConfigStore] = None,
        settings: Optional[StudioSettings] = None,
    ):
        """
        Args:
            schema: Template lookups
            content: Page lookups and queries
            config: Store holding the settings blob, read on every access
            settings: Fixed settings, used instead of the config store
        """
        self.schema = schema
        self.content = content
        self.config = config
        self._settings = settings

    @property
    def settings(self) -> StudioSettings:
        if self._settings is not None:
            return self._settings
        if self.config is None:
            return StudioSettings()
        return StudioSettings.from_blob(self.config.get_config())

    def is_data_container(self, page: Optional[PageNode]) -> bool:
        """True iff the page's template is on the enabled-template list."""
        if page is None or not page.template:
            return False
        return self.settings.is_enabled(page.template)

    def template_config(self, template_name: str) -> Optional[ListerConfig]:
        return self.settings.config_for(template_name)

    def child_templates(self, parent: Optional[PageNode]) -> List[TemplateDescriptor]:
        """
        Templates used by a container's children.

        Templates of the first few existing children win, in first-seen order.
        A container without children falls back to the child templates its
        own template allows.
        """
        if parent is None:
            return []

        found: List[TemplateDescriptor] = []
        for child in self.content.children(parent, limit=CHILD_SAMPLE_SIZE):
            template = self.schema.get_template(child.template)
            if template is not None and template.name not in [t.name for t in found]:
                found.append(template)

        if found:
            return found

        parent_template = self.schema.get_template(parent.template)
        if parent_template is None:
            return []

        for name in parent_template.child_template_names:
            template = self.schema.get_template(name)
            if template is not None and template.name not in [t.name for t in found]:
                found.append(template)

        if found:
            logger.debug(
                "No children under page %s, using allowed child templates of %s",
                parent.id,
                parent_template.name,
            )
        return found

    def allowed_field_names(self, template: TemplateDescriptor) -> List[str]:
        """Fieldgroup names that can be shown as table columns."""
        return [
            f.name
            for f in template.fields
            if f.name not in SYSTEM_FIELD_NAMES and f.kind in DISPLAY_SAFE_KINDS
        ]

    def select_display_fields(
        self, parent: Optional[PageNode], child_templates: Sequence[TemplateDescriptor]
    ) -> List[str]:
        """
        Columns of the child table.

        Manual mode keeps the configured names the first child template
        allows, in configured order. If none survive, or in auto mode, the
        first ``numFields`` allowed fields are used: of the first template,
        or in ``common`` mode of the ordered intersection over all templates.
        """
        if parent is None or not child_templates:
            return []

        config = self.template_config(parent.template)

        if config is not None and config.is_manual:
            manual = config.field_list()
            if manual:
                available = self.allowed_field_names(child_templates[0])
                valid = [name for name in manual if name in available]
                if valid:
                    return valid
                logger.debug(
                    "No usable manual fields for %s, selecting automatically", parent.template
                )

        num_fields = config.num_fields if config is not None else DEFAULT_NUM_FIELDS

        if config is not None and config.is_common and len(child_templates) > 1:
            return self._common_fields(child_templates)[:num_fields]

        return self.allowed_field_names(child_templates[0])[:num_fields]

    def _common_fields(self, child_templates: Sequence[TemplateDescriptor]) -> List[str]:
        common = self.allowed_field_names(child_templates[0])
        for template in child_templates[1:]:
            names = self.allowed_field_names(template)
            common = [name for name in common if name in names]
        return common

    def overview(
        self, page: Optional[PageNode], params: Optional[Mapping[str, Any]] = None
    ) -> Optional[ListerOverview]:
        """
        Assemble the listing for a container page.

        Returns:
            The listing, or None if the page is not a container or no child
            template can be determined
        """
        if not self.is_data_container(page):
            return None

        child_templates = self.child_templates(page)
        if not child_templates:
            logger.info("Container %s has no child templates", page.id)
            return None

        settings = self.settings
        fields = self.select_display_fields(page, child_templates)
        selector, active, allowed = build_query(page, fields, params)

        limit = max(1, settings.page_size)
        pg = page_number(params)
        start = page_start(pg, limit)

        selector_text = str(selector)
        items = self.content.find(selector_text, start=start, limit=limit)
        total = self.content.count(selector_text)

        logger.info(
            "Listing page %s of container %s: %d of %d item(s)", pg, page.id, len(items), total
        )

        return ListerOverview(
            parent=page,
            fields=fields,
            items=items,
            total=total,
            page_num=pg,
            limit=limit,
            selector=selector_text,
            active=active,
            allowed=allowed,
            child_templates=list(child_templates),
            pager=page_window(pg, page_count(total, limit)),
            show_help=settings.show_help,
            show_view=settings.show_view,
        )
