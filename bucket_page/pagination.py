"""
Pagination controls for bucket result pages.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .utils.messages import MessageResolver
from .utils.title import Title
from .widgets import ButtonGroupWidget, ButtonWidget

PAGE_SIZES = (20, 50, 100, 250, 500)

_default_messages = MessageResolver()


@dataclass(frozen=True)
class PagingState:
    """Current position in a result listing. Read-only; recomputed per render."""
    limit: int
    offset: int
    query: Mapping[str, Any] = field(default_factory=dict)
    has_next: bool = True


def _link_params(limit: int, offset: int, query: Mapping[str, Any]) -> Dict[str, Any]:
    # limit and offset win over same-named keys in the caller's parameters
    params = {'limit': limit, 'offset': offset}
    for key, value in query.items():
        if key not in params:
            params[key] = value
    return params


def get_page_links(
    title: Title,
    limit: int,
    offset: int,
    query: Optional[Mapping[str, Any]] = None,
    has_next: bool = True,
    messages: Optional[MessageResolver] = None
) -> ButtonGroupWidget:
    """
    Build the previous / page size / next button row.

    Every link keeps the caller's extra query parameters (active filters and
    the like). Each link's parameters are built from the untouched base
    parameters, so no link inherits another's limit or offset.

    Args:
        title: Page the links point at
        limit: Current page size
        offset: Current offset
        query: Extra query parameters to carry along
        has_next: Whether a further page exists
        messages: Message lookup for labels and tooltips

    Returns:
        ButtonGroupWidget with previous, one button per page size, next
    """
    query = query or {}
    messages = messages or _default_messages
    links = []

    previous_offset = max(0, offset - limit)
    links.append(ButtonWidget(
        href=title.get_local_url(_link_params(limit, previous_offset, query)),
        title=messages.get('bucket-previous-results', limit),
        label=f"{messages.get('bucket-previous')} {limit}",
        disabled=(offset == 0)
    ))

    for num in PAGE_SIZES:
        links.append(ButtonWidget(
            href=title.get_local_url(_link_params(num, offset, query)),
            title=f"Show {num} results per page.",
            label=num,
            active=(num == limit)
        ))

    links.append(ButtonWidget(
        href=title.get_local_url(_link_params(limit, offset + limit, query)),
        title=messages.get('bucket-next-results', limit),
        label=f"{messages.get('bucket-next')} {limit}",
        disabled=not has_next
    ))

    return ButtonGroupWidget(items=links)


def get_paging_links(
    title: Title,
    state: PagingState,
    messages: Optional[MessageResolver] = None
) -> ButtonGroupWidget:
    """Build page links from a PagingState."""
    return get_page_links(title, state.limit, state.offset, state.query,
                          has_next=state.has_next, messages=messages)
