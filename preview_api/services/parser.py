from __future__ import annotations

from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from preview_api.schemas import ImageSource, RawExtraction

OG_TAGS = (
    "og:title",
    "og:description",
    "og:image",
    "og:site_name",
    "og:type",
    "og:url",
)


def read_tag(element: Tag, name: str) -> str | None:
    """Return the ``content`` of a meta element declared as ``name``.

    The element matches when either its ``property`` or its ``name`` attribute
    equals ``name``; Open Graph tags show up under both in the wild.
    """
    if element.get("property") == name or element.get("name") == name:
        return element.get("content")
    return None


def resolve_url(base_url: str, src: str) -> str | None:
    src = src.strip()
    if not src:
        return None
    try:
        resolved = urljoin(base_url, src)
        if not urlparse(resolved).scheme:
            return None
    except ValueError:
        return None
    return resolved


def _document_base(soup: BeautifulSoup, page_url: str) -> str:
    base = soup.find("base", href=True)
    if base is None:
        return page_url
    return resolve_url(page_url, base["href"]) or page_url


def parse_document(html: str, page_url: str) -> RawExtraction:
    """Read title, description, Open Graph tags and images from ``html``."""
    soup = BeautifulSoup(html, "html.parser")

    meta: dict[str, str] = {}
    title = soup.find("title")
    if title is not None:
        meta["title"] = title.get_text().strip()
    description = soup.find("meta", attrs={"name": "description"})
    if description is not None:
        meta["description"] = description.get("content") or ""

    base_url = _document_base(soup, page_url)
    og: dict[str, str] = {}
    for element in soup.find_all("meta"):
        for name in OG_TAGS:
            value = read_tag(element, name)
            if value:
                og[name.split(":", 1)[1]] = value
    if "image" in og:
        image = resolve_url(base_url, og["image"])
        if image is None:
            del og["image"]
        else:
            og["image"] = image

    images: list[ImageSource] = []
    for element in soup.find_all("img", src=True):
        src = resolve_url(base_url, element["src"])
        if src is not None:
            images.append(ImageSource(src=src))

    return RawExtraction(meta=meta, og=og, images=images)
