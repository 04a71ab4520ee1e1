"""
Guidelines Service

Read-only queries over the cached usage guidelines, including the
name-based relations to components and tokens. Relations are plain name
references: a guideline may point at a component or token that does not
exist, and relation lookups that match nothing return an empty list.
"""

from design_system.application.services.base import (
    BaseService,
    any_contains,
    contains,
    has_member,
    sorted_unique,
)
from design_system.core.exceptions import service_operation
from design_system.data.data_manager import CachedDataset
from design_system.data.models import Guideline

SERVICE = "guidelines"


def filter_guidelines(
    guidelines: tuple[Guideline, ...],
    category: str | None = None,
    tags: list[str] | None = None,
    related_component: str | None = None,
    related_token: str | None = None,
) -> list[Guideline]:
    """Apply the guideline filters (all case-insensitive); every given filter must match."""
    wanted_category = category.lower() if category else None
    wanted_tags = {t.lower() for t in tags or [] if t}

    result = []
    for guideline in guidelines:
        if wanted_category and guideline.category.lower() != wanted_category:
            continue
        if wanted_tags and not wanted_tags <= {t.lower() for t in guideline.tags}:
            continue
        if related_component and not has_member(guideline.related_components, related_component):
            continue
        if related_token and not has_member(guideline.related_tokens, related_token):
            continue
        result.append(guideline)
    return result


class GuidelinesService(BaseService):
    """Facade for design guidelines."""

    service_name = SERVICE

    @service_operation(SERVICE)
    async def get_guidelines(
        self,
        category: str | None = None,
        tags: list[str] | None = None,
        related_component: str | None = None,
        related_token: str | None = None,
    ) -> list[Guideline]:
        return await self._guarded(
            "get_guidelines",
            lambda data: filter_guidelines(data.guidelines, category, tags, related_component, related_token),
        )

    @service_operation(SERVICE)
    async def get_guideline(self, guideline_id: str) -> Guideline:
        return await self._lookup(self._require_text(guideline_id, "Guideline ID"), "get_guideline")

    async def _lookup(self, guideline_id: str, operation: str) -> Guideline:
        wanted = guideline_id.lower()

        def find(data: CachedDataset):
            match = next((g for g in data.guidelines if g.id.lower() == wanted), None)
            return match, [g.id for g in data.guidelines]

        guideline, ids = await self._guarded(operation, find)
        if guideline is None:
            raise self._not_found(
                "Guideline",
                guideline_id,
                [f"Available guidelines: {', '.join(ids)}", "Check guideline ID spelling"],
            )
        return guideline

    @service_operation(SERVICE)
    async def search_guidelines(self, query: str) -> list[Guideline]:
        """Substring search over title, content, category and tags."""
        term = self._require_text(query, "Search query").lower()

        def search(data: CachedDataset) -> list[Guideline]:
            return [
                g for g in data.guidelines
                if contains(g.title, term)
                or contains(g.content, term)
                or contains(g.category, term)
                or any_contains(g.tags, term)
            ]

        return await self._guarded("search_guidelines", search)

    @service_operation(SERVICE)
    async def get_guidelines_by_category(self, category: str) -> list[Guideline]:
        category = self._require_text(category, "Category")
        return await self._guarded(
            "get_guidelines_by_category",
            lambda data: filter_guidelines(data.guidelines, category=category),
        )

    @service_operation(SERVICE)
    async def get_guideline_categories(self) -> list[str]:
        return await self._guarded(
            "get_guideline_categories",
            lambda data: sorted_unique(g.category for g in data.guidelines),
        )

    @service_operation(SERVICE)
    async def get_guidelines_by_tag(self, tag: str) -> list[Guideline]:
        tag = self._require_text(tag, "Tag")
        return await self._guarded(
            "get_guidelines_by_tag",
            lambda data: filter_guidelines(data.guidelines, tags=[tag]),
        )

    @service_operation(SERVICE)
    async def get_available_tags(self) -> list[str]:
        return await self._guarded(
            "get_available_tags",
            lambda data: sorted_unique(tag for g in data.guidelines for tag in g.tags),
        )

    @service_operation(SERVICE)
    async def get_related_to_component(self, component_name: str) -> list[Guideline]:
        component_name = self._require_text(component_name, "Component name")
        return await self._guarded(
            "get_related_to_component",
            lambda data: filter_guidelines(data.guidelines, related_component=component_name),
        )

    @service_operation(SERVICE)
    async def get_related_to_token(self, token_name: str) -> list[Guideline]:
        token_name = self._require_text(token_name, "Token name")
        return await self._guarded(
            "get_related_to_token",
            lambda data: filter_guidelines(data.guidelines, related_token=token_name),
        )

    @service_operation(SERVICE)
    async def get_related_components(self, guideline_id: str) -> list[str]:
        guideline = await self._lookup(self._require_text(guideline_id, "Guideline ID"), "get_related_components")
        return list(guideline.related_components or ())

    @service_operation(SERVICE)
    async def get_related_tokens(self, guideline_id: str) -> list[str]:
        guideline = await self._lookup(self._require_text(guideline_id, "Guideline ID"), "get_related_tokens")
        return list(guideline.related_tokens or ())
