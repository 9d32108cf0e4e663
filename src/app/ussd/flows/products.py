"""Fluxo de navegação no catálogo: categoria → produto → detalhe."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from app.domain.product import PRODUCT_CATEGORIES, Product
from app.sessions.flow_data import ProductBrowseDraft
from app.ussd.flows.base import (
    FieldFlow,
    FieldValidationError,
    FlowContext,
    FlowOutcome,
    with_hint,
)
from fsm.states import MenuNode

if TYPE_CHECKING:
    from app.protocols.catalog import ProductCatalogProtocol
    from app.sessions.flow_data import FlowData

PRODUCTS_PER_PAGE = 5


def _pick(token: str, count: int) -> int | None:
    """Índice 0-based da opção numerada, ou None se fora da faixa."""
    if not token.isdigit():
        return None
    choice = int(token)
    return choice - 1 if 1 <= choice <= count else None


class BrowseProductsFlow(FieldFlow):
    """Lista categorias fixas e até 5 produtos ativos da escolhida."""

    node: ClassVar[MenuNode] = MenuNode.BROWSE_PRODUCTS
    fields: ClassVar[tuple[str, ...]] = ("category", "product")

    def __init__(
        self,
        catalog: ProductCatalogProtocol,
        categories: tuple[str, ...] = PRODUCT_CATEGORIES,
    ) -> None:
        self._catalog = catalog
        self._categories = categories

    def new_draft(self) -> FlowData | None:
        return ProductBrowseDraft()

    async def _products(self, context: FlowContext, category: str) -> list[Product]:
        key = f"products:{category}"
        if key not in context.memo:
            context.memo[key] = await self._catalog.list_products(
                category, limit=PRODUCTS_PER_PAGE
            )
        return context.memo[key]

    async def accept(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        token: str,
    ) -> FlowData | None:
        current = draft if isinstance(draft, ProductBrowseDraft) else ProductBrowseDraft()
        if field_name == "category":
            index = _pick(token, len(self._categories))
            if index is None:
                raise FieldValidationError(
                    f"Invalid category. Choose 1-{len(self._categories)}."
                )
            return current.model_copy(update={"category": self._categories[index]})

        products = await self._products(context, current.category or "")
        index = _pick(token, len(products))
        if index is None:
            raise FieldValidationError(f"Invalid product. Choose 1-{max(len(products), 1)}.")
        return current.model_copy(update={"product_id": products[index].product_id})

    async def prompt(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        hint: str | None,
    ) -> FlowOutcome:
        current = draft if isinstance(draft, ProductBrowseDraft) else ProductBrowseDraft()
        if field_name == "category":
            lines = ["Browse Products", "Select category:"]
            lines.extend(f"{i}. {name}" for i, name in enumerate(self._categories, start=1))
            return FlowOutcome.prompt(with_hint("\n".join(lines), hint), current)

        category = current.category or ""
        products = await self._products(context, category)
        if not products:
            return FlowOutcome.completed(
                f"No {category} products are available right now.\nPlease check again later.",
                current,
            )
        lines = [f"{category}:"]
        lines.extend(
            f"{i}. {p.name} - NGN{p.price:,.0f}/{p.unit}"
            for i, p in enumerate(products, start=1)
        )
        return FlowOutcome.prompt(with_hint("\n".join(lines), hint), current)

    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome:
        current = draft if isinstance(draft, ProductBrowseDraft) else ProductBrowseDraft()
        products = await self._products(context, current.category or "")
        product = next(p for p in products if p.product_id == current.product_id)
        lines = [
            product.name,
            f"Price: NGN{product.price:,.0f}/{product.unit}",
            f"Category: {product.category}",
        ]
        if product.location:
            lines.append(f"Location: {product.location}")
        lines.append("Visit grochain.ng to place an order.")
        return FlowOutcome.completed("\n".join(lines), current)
