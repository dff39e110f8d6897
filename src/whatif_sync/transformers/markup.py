"""Helpers for parsing, querying and serializing archive markup."""

import html
import re
from urllib.parse import urlsplit

import lxml.html
from lxml import etree

from whatif_sync.clients.exceptions import ParseError

DOCTYPE = "<!DOCTYPE html>"

ILLUSTRATION_CLASS = "illustration"
ARCHIVE_IMAGE_CLASS = "archive-image"
REF_CLASS = "ref"
REFNUM_CLASS = "refnum"
REFBODY_CLASS = "refbody"

_CLASS_XPATH = etree.XPath(
    "descendant-or-self::*[contains(concat(' ', normalize-space(@class), ' '), $token)]"
)
_AUTHORITY_PREFIX = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]*:)?//[^/]*")


def parse_document(markup: str, url: str | None = None) -> lxml.html.HtmlElement:
    """Parse a full HTML page.

    Raises:
        ParseError: If the markup cannot be parsed as a document
    """
    if not markup or not markup.strip():
        raise ParseError("Document is empty", url=url)
    try:
        return lxml.html.document_fromstring(markup)
    except (etree.ParserError, ValueError) as e:
        raise ParseError(f"Unparseable document: {e}", url=url) from e


def serialize(doc: lxml.html.HtmlElement) -> str:
    return lxml.html.tostring(doc, encoding="unicode", doctype=DOCTYPE)


def select_class(root: lxml.html.HtmlElement, class_name: str) -> list:
    """Return the elements carrying a CSS class, in document order."""
    return _CLASS_XPATH(root, token=f" {class_name} ")


def inner_html(element: lxml.html.HtmlElement) -> str:
    """Serialize the children of an element, without the element itself."""
    parts = [html.escape(element.text, quote=False)] if element.text else []
    parts.extend(lxml.html.tostring(child, encoding="unicode") for child in element)
    return "".join(parts)


def drop(elements) -> None:
    for element in list(elements):
        element.drop_tree()


def canonical_url(src: str, base_url: str) -> str:
    """Pin an asset reference to the archive host.

    Sources are usually a bare path, but some pages carry full URLs,
    protocol-relative URLs or plain http; only the path is kept. A host part
    that does not parse (such as an unclosed IPv6 bracket) is cut off as is.

    Examples:
        >>> canonical_url("//what-if.xkcd.com/imgs/a1/a.png", "https://what-if.xkcd.com")
        'https://what-if.xkcd.com/imgs/a1/a.png'
        >>> canonical_url("imgs/a1/a.png", "https://what-if.xkcd.com")
        'https://what-if.xkcd.com/imgs/a1/a.png'
    """
    base = urlsplit(base_url)
    path = _source_path(src.strip())
    if not path.startswith("/"):
        path = "/" + path
    return f"{base.scheme}://{base.netloc}{path}"


def _source_path(src: str) -> str:
    try:
        return urlsplit(src).path
    except ValueError:
        path = _AUTHORITY_PREFIX.sub("", src, count=1)
        return re.split(r"[?#]", path, maxsplit=1)[0]
