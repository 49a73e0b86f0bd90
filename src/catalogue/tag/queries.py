from catalogue.tag.tag import Tag
from shared.utils.queries import fetch_all


def tag_to_dict(tag: Tag) -> dict:
    return {"id": str(tag.id), "name": tag.name, "type": tag.type, "color": tag.color}


def list_tags(tag_type: str | None = None) -> list[dict]:
    tags = fetch_all(Tag, type=tag_type) if tag_type else fetch_all(Tag)
    return [tag_to_dict(t) for t in sorted(tags, key=lambda t: (t.type, t.name))]
