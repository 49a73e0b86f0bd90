"""Category hierarchy helpers.

Categories are stored as a flat parent-pointer table. These helpers turn
the flat rows (plain dicts with at least ``id`` and ``parent_id``) into a
nested tree and answer ancestry questions used to keep the tree acyclic.
"""

from collections.abc import Iterable, Mapping


def index_by_id(categories: Iterable[Mapping]) -> dict[str, Mapping]:
    return {str(c["id"]): c for c in categories}


def _parent_of(node: Mapping) -> str | None:
    parent_id = node.get("parent_id")
    return str(parent_id) if parent_id else None


def build_category_tree(categories: Iterable[Mapping]) -> list[dict]:
    """Nest a flat, pre-sorted category list under its parents.

    Each returned node is a copy of the input row with a ``children`` list.
    Siblings keep their input order. A node whose parent is not part of the
    input is unreachable from any root and is left out together with its
    subtree.
    """
    rows = list(categories)
    nodes = {str(row["id"]): {**row, "children": []} for row in rows}
    roots = []

    for row in rows:
        node = nodes[str(row["id"])]
        parent_id = _parent_of(row)
        if parent_id is None:
            roots.append(node)
        elif parent_id in nodes:
            nodes[parent_id]["children"].append(node)

    return roots


def ancestors(category_id: str, by_id: Mapping[str, Mapping]) -> list[Mapping]:
    """Parents of ``category_id`` from the nearest up to the root.

    Stops at a missing parent and never loops on corrupt data.
    """
    chain = []
    seen = {str(category_id)}
    current = by_id.get(str(category_id))

    while current is not None:
        parent_id = _parent_of(current)
        if parent_id is None or parent_id in seen:
            break
        seen.add(parent_id)
        current = by_id.get(parent_id)
        if current is not None:
            chain.append(current)

    return chain


def is_descendant_of(candidate_id: str, ancestor_id: str, by_id: Mapping[str, Mapping]) -> bool:
    """True when ``ancestor_id`` appears in ``candidate_id``'s parent chain."""
    return any(str(node["id"]) == str(ancestor_id) for node in ancestors(candidate_id, by_id))


def breadcrumb(category_id: str, by_id: Mapping[str, Mapping]) -> list[Mapping]:
    """Path from the root down to and including ``category_id``."""
    node = by_id.get(str(category_id))
    if node is None:
        return []
    return [*reversed(ancestors(category_id, by_id)), node]


def descendant_ids(category_id: str, categories: Iterable[Mapping]) -> set[str]:
    rows = list(categories)
    by_id = index_by_id(rows)
    return {str(row["id"]) for row in rows if is_descendant_of(str(row["id"]), category_id, by_id)}


def eligible_parents(category_id: str | None, categories: Iterable[Mapping]) -> list[Mapping]:
    """Categories that ``category_id`` may be placed under.

    Everything except the category itself and its descendants; for a new
    category (no id yet) every category qualifies.
    """
    rows = list(categories)
    if category_id is None:
        return rows

    excluded = descendant_ids(category_id, rows) | {str(category_id)}
    return [row for row in rows if str(row["id"]) not in excluded]


def is_valid_parent(category_id: str, parent_id: str | None, categories: Iterable[Mapping]) -> bool:
    if parent_id is None:
        return True
    return any(str(row["id"]) == str(parent_id) for row in eligible_parents(category_id, categories))
