"""
Design Token Service

Read-only queries over the cached design tokens. Every method goes through
the service's circuit breaker; name lookups are case-insensitive.
"""

from design_system.application.services.base import (
    BaseService,
    any_contains,
    contains,
    sorted_unique,
)
from design_system.core.config.constants import MAX_SUGGESTED_TOKENS, TOKEN_CATEGORIES
from design_system.core.exceptions import ValidationError, service_operation
from design_system.data.data_manager import CachedDataset
from design_system.data.models import DesignToken

SERVICE = "design-tokens"


def _available_tokens_hint(names: list[str]) -> str:
    more = "..." if len(names) > MAX_SUGGESTED_TOKENS else ""
    return f"Available tokens: {', '.join(names[:MAX_SUGGESTED_TOKENS])}{more}"


def filter_tokens(
    tokens: tuple[DesignToken, ...],
    category: str | None = None,
    deprecated: bool | None = None,
    has_usage: list[str] | None = None,
) -> list[DesignToken]:
    """
    Apply the token filters; every given filter must match.

    ``has_usage`` terms must each be a substring of some usage entry.
    """
    wanted_category = category.lower() if category else None
    usage_terms = [u.lower() for u in has_usage or [] if u]

    result = []
    for token in tokens:
        if wanted_category and token.category != wanted_category:
            continue
        if deprecated is not None and bool(token.deprecated) != deprecated:
            continue
        if usage_terms and not all(any_contains(token.usage, term) for term in usage_terms):
            continue
        result.append(token)
    return result


class DesignTokenService(BaseService):
    """Facade for design tokens (colors, typography, spacing, elevation, motion)."""

    service_name = SERVICE

    @service_operation(SERVICE)
    async def get_tokens(
        self,
        category: str | None = None,
        deprecated: bool | None = None,
        has_usage: list[str] | None = None,
    ) -> list[DesignToken]:
        return await self._guarded(
            "get_tokens",
            lambda data: filter_tokens(data.tokens, category, deprecated, has_usage),
        )

    @service_operation(SERVICE)
    async def get_token(self, name: str) -> DesignToken:
        name = self._require_text(name, "Token name")
        return await self._lookup(name, "get_token")

    async def _lookup(self, name: str, operation: str) -> DesignToken:
        wanted = name.lower()

        def find(data: CachedDataset):
            match = next((t for t in data.tokens if t.name.lower() == wanted), None)
            return match, [t.name for t in data.tokens]

        token, names = await self._guarded(operation, find)
        if token is None:
            raise self._not_found(
                "Design token",
                name,
                [
                    _available_tokens_hint(names),
                    "Check token name spelling",
                    "Use search-design-tokens to find similar tokens",
                ],
            )
        return token

    @service_operation(SERVICE)
    async def search_tokens(self, query: str) -> list[DesignToken]:
        """Substring search over name, value, description, category, usage and aliases."""
        term = self._require_text(query, "Search query").lower()

        def search(data: CachedDataset) -> list[DesignToken]:
            return [
                t for t in data.tokens
                if contains(t.name, term)
                or contains(str(t.value), term)
                or contains(t.description, term)
                or contains(t.category, term)
                or any_contains(t.usage, term)
                or any_contains(t.aliases, term)
            ]

        return await self._guarded("search_tokens", search)

    @service_operation(SERVICE)
    async def get_tokens_by_category(self, category: str) -> list[DesignToken]:
        category = self._require_text(category, "Category").lower()
        if category not in TOKEN_CATEGORIES:
            raise ValidationError(
                f'Unknown token category "{category}"',
                suggestions=[f"Valid categories: {', '.join(TOKEN_CATEGORIES)}"],
                context={"service": SERVICE, "category": category},
            )
        return await self._guarded(
            "get_tokens_by_category", lambda data: filter_tokens(data.tokens, category=category)
        )

    @service_operation(SERVICE)
    async def get_token_categories(self) -> list[str]:
        return await self._guarded(
            "get_token_categories", lambda data: sorted_unique(t.category for t in data.tokens)
        )

    @service_operation(SERVICE)
    async def get_token_usage(self, name: str) -> list[str]:
        token = await self._lookup(self._require_text(name, "Token name"), "get_token_usage")
        return list(token.usage or ())

    @service_operation(SERVICE)
    async def get_token_aliases(self, name: str) -> list[str]:
        token = await self._lookup(self._require_text(name, "Token name"), "get_token_aliases")
        return list(token.aliases or ())

    @service_operation(SERVICE)
    async def get_deprecated_tokens(self) -> list[DesignToken]:
        return await self._guarded(
            "get_deprecated_tokens", lambda data: filter_tokens(data.tokens, deprecated=True)
        )

    @service_operation(SERVICE)
    async def get_active_tokens(self) -> list[DesignToken]:
        return await self._guarded(
            "get_active_tokens", lambda data: filter_tokens(data.tokens, deprecated=False)
        )

    @service_operation(SERVICE)
    async def find_tokens_by_value(self, value: str | int | float) -> list[DesignToken]:
        """Exact value match; strings compare case-insensitively, numbers by equality."""
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise ValidationError(
                "Token value must be a string or a number",
                context={"service": SERVICE, "parameter": "value"},
            )
        if isinstance(value, str):
            wanted = self._require_text(value, "Token value").lower()

            def match(data: CachedDataset) -> list[DesignToken]:
                return [t for t in data.tokens if str(t.value).lower() == wanted]
        else:
            def match(data: CachedDataset) -> list[DesignToken]:
                return [t for t in data.tokens if not isinstance(t.value, str) and t.value == value]

        return await self._guarded("find_tokens_by_value", match)

    @service_operation(SERVICE)
    async def get_tokens_with_usage(self, usage: str) -> list[DesignToken]:
        usage = self._require_text(usage, "Usage")
        return await self._guarded(
            "get_tokens_with_usage", lambda data: filter_tokens(data.tokens, has_usage=[usage])
        )
