"""Plain-text and HTML framing shared by every bakery email."""

from datetime import UTC, datetime
from html import escape

from notifications.brand import BAKERY_BRAND


def greeting(name, fallback="Hello,"):
    return f"Hello {name}," if name else fallback


def text_email(title: str, paragraphs: list[str], unsubscribe_url: str | None = None) -> str:
    lines = [f"This is a message from {BAKERY_BRAND['name']}.", "", title, ""]
    for paragraph in paragraphs:
        lines.extend([paragraph, ""])
    if unsubscribe_url:
        lines.extend([f"To unsubscribe from these emails, visit: {unsubscribe_url}", ""])
    lines.append(f"© {datetime.now(UTC).year} {BAKERY_BRAND['name']}. All rights reserved.")
    return "\n".join(lines)


def html_email(
    title: str,
    paragraphs: list[str],
    button: tuple[str, str] | None = None,
    subtitle: str | None = None,
    unsubscribe_url: str | None = None,
) -> str:
    """Branded HTML body; ``button`` is a ``(label, url)`` call to action."""
    parts = [
        '<div style="font-family:Georgia,serif;max-width:600px;margin:0 auto;color:#3f2d20">',
        f'<h1 style="color:#b4536b">{escape(title)}</h1>',
    ]
    if subtitle:
        parts.append(f"<h2>{escape(subtitle)}</h2>")
    for paragraph in paragraphs:
        parts.append(f"<p>{escape(paragraph).replace(chr(10), '<br>')}</p>")
    if button:
        label, url = button
        parts.append(
            f'<p><a href="{escape(url, quote=True)}" '
            'style="background:#b4536b;color:#fff;padding:12px 24px;border-radius:6px;'
            f'text-decoration:none">{escape(label)}</a></p>'
        )
    parts.append(
        '<hr><p style="font-size:12px;color:#8a7060">'
        f"{escape(BAKERY_BRAND['name'])} · {escape(BAKERY_BRAND['tagline'])}<br>"
        f"{escape(BAKERY_BRAND['address'])}<br>"
        f"Questions? {escape(BAKERY_BRAND['email'])}"
    )
    if unsubscribe_url:
        parts.append(f'<br><a href="{escape(unsubscribe_url, quote=True)}">Unsubscribe</a>')
    parts.append("</p></div>")
    return "".join(parts)
