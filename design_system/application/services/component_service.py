"""
Component Service

Read-only queries over the cached component specifications: props,
variants, code examples and categories. Every method goes through the
service's circuit breaker; name lookups are case-insensitive.
"""

from design_system.application.services.base import (
    BaseService,
    any_contains,
    contains,
    sorted_unique,
)
from design_system.core.exceptions import service_operation
from design_system.data.data_manager import CachedDataset
from design_system.data.models import Component, ComponentExample, ComponentProp, ComponentVariant

SERVICE = "components"


def filter_components(
    components: tuple[Component, ...],
    category: str | None = None,
    name: str | None = None,
    has_props: list[str] | None = None,
    has_variants: list[str] | None = None,
) -> list[Component]:
    """
    Apply the component filters; every given filter must match.

    ``category`` matches exactly and ``name`` by substring, both ignoring
    case. ``has_props`` / ``has_variants`` require all listed names.
    """
    wanted_category = category.lower() if category else None
    name_term = name.lower() if name else None
    props = {p.lower() for p in has_props or [] if p}
    variants = {v.lower() for v in has_variants or [] if v}

    result = []
    for component in components:
        if wanted_category and component.category.lower() != wanted_category:
            continue
        if name_term and name_term not in component.name.lower():
            continue
        if props and not props <= {p.name.lower() for p in component.props}:
            continue
        if variants and not variants <= {v.name.lower() for v in component.variants}:
            continue
        result.append(component)
    return result


class ComponentService(BaseService):
    """Facade for UI component specifications."""

    service_name = SERVICE

    @service_operation(SERVICE)
    async def get_components(
        self,
        category: str | None = None,
        name: str | None = None,
        has_props: list[str] | None = None,
        has_variants: list[str] | None = None,
    ) -> list[Component]:
        return await self._guarded(
            "get_components",
            lambda data: filter_components(data.components, category, name, has_props, has_variants),
        )

    @service_operation(SERVICE)
    async def get_component(self, name: str) -> Component:
        return await self._lookup(self._require_text(name, "Component name"), "get_component")

    async def _lookup(self, name: str, operation: str) -> Component:
        wanted = name.lower()

        def find(data: CachedDataset):
            match = next((c for c in data.components if c.name.lower() == wanted), None)
            return match, [c.name for c in data.components]

        component, names = await self._guarded(operation, find)
        if component is None:
            raise self._not_found(
                "Component",
                name,
                [f"Available components: {', '.join(names)}", "Check component name spelling"],
            )
        return component

    @service_operation(SERVICE)
    async def get_component_variants(self, name: str) -> list[ComponentVariant]:
        component = await self._lookup(self._require_text(name, "Component name"), "get_component_variants")
        return list(component.variants)

    @service_operation(SERVICE)
    async def get_component_variant(self, component_name: str, variant_name: str) -> ComponentVariant:
        component_name = self._require_text(component_name, "Component name")
        variant_name = self._require_text(variant_name, "Variant name")
        component = await self._lookup(component_name, "get_component_variant")

        wanted = variant_name.lower()
        variant = next((v for v in component.variants if v.name.lower() == wanted), None)
        if variant is None:
            raise self._not_found(
                "Variant",
                variant_name,
                [f"Available variants: {', '.join(v.name for v in component.variants)}"],
                within=f'component "{component_name}"',
            )
        return variant

    @service_operation(SERVICE)
    async def get_component_examples(self, name: str) -> list[ComponentExample]:
        component = await self._lookup(self._require_text(name, "Component name"), "get_component_examples")
        return list(component.examples)

    @service_operation(SERVICE)
    async def get_component_example(self, component_name: str, example_title: str) -> ComponentExample:
        component_name = self._require_text(component_name, "Component name")
        example_title = self._require_text(example_title, "Example title")
        component = await self._lookup(component_name, "get_component_example")

        wanted = example_title.lower()
        example = next((e for e in component.examples if e.title.lower() == wanted), None)
        if example is None:
            raise self._not_found(
                "Example",
                example_title,
                [f"Available examples: {', '.join(e.title for e in component.examples)}"],
                within=f'component "{component_name}"',
            )
        return example

    @service_operation(SERVICE)
    async def get_component_props(self, name: str) -> list[ComponentProp]:
        component = await self._lookup(self._require_text(name, "Component name"), "get_component_props")
        return list(component.props)

    @service_operation(SERVICE)
    async def get_required_props(self, name: str) -> list[ComponentProp]:
        component = await self._lookup(self._require_text(name, "Component name"), "get_required_props")
        return list(component.required_props)

    @service_operation(SERVICE)
    async def get_optional_props(self, name: str) -> list[ComponentProp]:
        component = await self._lookup(self._require_text(name, "Component name"), "get_optional_props")
        return list(component.optional_props)

    @service_operation(SERVICE)
    async def search_components(self, query: str) -> list[Component]:
        """Substring search over name, description, category, guideline text and props."""
        term = self._require_text(query, "Search query").lower()

        def search(data: CachedDataset) -> list[Component]:
            return [
                c for c in data.components
                if contains(c.name, term)
                or contains(c.description, term)
                or contains(c.category, term)
                or any_contains(c.guidelines, term)
                or any(contains(p.name, term) or contains(p.description, term) for p in c.props)
            ]

        return await self._guarded("search_components", search)

    @service_operation(SERVICE)
    async def get_components_by_category(self, category: str) -> list[Component]:
        category = self._require_text(category, "Category")
        return await self._guarded(
            "get_components_by_category",
            lambda data: filter_components(data.components, category=category),
        )

    @service_operation(SERVICE)
    async def get_component_categories(self) -> list[str]:
        return await self._guarded(
            "get_component_categories",
            lambda data: sorted_unique(c.category for c in data.components),
        )
