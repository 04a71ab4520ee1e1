"""
Unit Tests for GuidelinesService

Includes the name-based relations between guidelines, components and
tokens.
"""

from datetime import datetime, timezone

import pytest

from design_system.application.services import GuidelinesService
from design_system.core.exceptions import ResourceNotFoundError, ValidationError
from design_system.data.data_manager import DataManager, DataManagerConfig
from tests.test_fixtures.dataset_factory import DatasetFactory


def ids(guidelines) -> list[str]:
    return [g.id for g in guidelines]


@pytest.mark.unit
class TestGuidelineLookup:
    async def test_get_guideline(self, guidelines_service):
        guideline = await guidelines_service.get_guideline("COLOR-USAGE")

        assert guideline.id == "color-usage"
        assert guideline.last_updated == datetime(2024, 3, 1, tzinfo=timezone.utc)

    async def test_not_found(self, guidelines_service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await guidelines_service.get_guideline("typography")

        assert exc_info.value.message == 'Guideline "typography" not found'
        assert exc_info.value.suggestions == [
            "Available guidelines: color-usage, spacing-scale",
            "Check guideline ID spelling",
        ]

    async def test_blank_id(self, guidelines_service):
        with pytest.raises(ValidationError):
            await guidelines_service.get_guideline("")
        assert guidelines_service.breaker.get_stats().total_requests == 0


@pytest.mark.unit
class TestGuidelineFilters:
    async def test_category(self, guidelines_service):
        assert ids(await guidelines_service.get_guidelines(category="Layout")) == ["spacing-scale"]
        assert ids(await guidelines_service.get_guidelines_by_category("color")) == ["color-usage"]

    async def test_tags_must_all_match(self, guidelines_service):
        assert ids(await guidelines_service.get_guidelines(tags=["COLOR"])) == ["color-usage"]
        assert ids(await guidelines_service.get_guidelines(tags=["spacing", "layout"])) == ["spacing-scale"]
        assert await guidelines_service.get_guidelines(tags=["color", "layout"]) == []

    async def test_related_filters(self, guidelines_service):
        assert ids(await guidelines_service.get_guidelines(related_component="button")) == ["color-usage"]
        assert ids(await guidelines_service.get_guidelines(related_token="SPACING-MD")) == ["spacing-scale"]

    async def test_by_tag(self, guidelines_service):
        assert ids(await guidelines_service.get_guidelines_by_tag("Spacing")) == ["spacing-scale"]

    async def test_categories_and_tags(self, guidelines_service):
        assert await guidelines_service.get_guideline_categories() == ["color", "layout"]
        assert await guidelines_service.get_available_tags() == ["accessibility", "color", "layout", "spacing"]


@pytest.mark.unit
class TestGuidelineSearch:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("pixel", ["spacing-scale"]),
            ("ACCESSIBILITY", ["color-usage"]),
            ("color usage", ["color-usage"]),
            ("use", ["color-usage", "spacing-scale"]),
            ("motion", []),
        ],
    )
    async def test_search(self, guidelines_service, query, expected):
        assert ids(await guidelines_service.search_guidelines(query)) == expected

    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_blank_query_never_reaches_breaker(self, guidelines_service, query):
        with pytest.raises(ValidationError) as exc_info:
            await guidelines_service.search_guidelines(query)

        assert exc_info.value.message == "Search query must be a non-empty string"
        assert guidelines_service.breaker.get_stats().total_requests == 0


@pytest.mark.unit
class TestRelations:
    async def test_guidelines_for_component_and_token(self, guidelines_service):
        assert ids(await guidelines_service.get_related_to_component("Button")) == ["color-usage"]
        assert ids(await guidelines_service.get_related_to_token("primary-blue")) == ["color-usage"]
        assert await guidelines_service.get_related_to_component("Card") == []

    async def test_names_related_to_guideline(self, guidelines_service):
        assert await guidelines_service.get_related_components("color-usage") == ["Button"]
        assert await guidelines_service.get_related_tokens("spacing-scale") == ["spacing-md"]
        assert await guidelines_service.get_related_components("spacing-scale") == []

    async def test_dangling_references_are_kept(self, tmp_path, registry, breaker_config):
        guideline = DatasetFactory.guideline("ghost-rules", relatedComponents=["Ghost"])
        directory = DatasetFactory.write(tmp_path, guidelines=[guideline])
        manager = DataManager(DataManagerConfig(data_path=directory, enable_file_watching=False))
        await manager.load_data()
        service = GuidelinesService(manager, registry.get_or_create(breaker_config("guidelines")))

        assert ids(await service.get_related_to_component("ghost")) == ["ghost-rules"]
        assert await service.get_related_components("ghost-rules") == ["Ghost"]
