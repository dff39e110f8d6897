"""Document Transformer for rendering archive articles in the reader.

Rewrites an article page so it renders both online and fully offline:
swaps the site stylesheet for a themed one, points illustrations and the
math script at remote or local copies, strips the site chrome and moves
footnote bodies out of the page.
"""

import logging

import lxml.html

from schemas.article import Article, LoadedArticle
from schemas.settings import DEFAULT_BASE_URL, DEFAULT_MATHJAX_URL, ThemeSettings
from whatif_sync.storage.asset_cache import AssetCache

from .markup import (
    ILLUSTRATION_CLASS,
    REF_CLASS,
    REFBODY_CLASS,
    REFNUM_CLASS,
    canonical_url,
    drop,
    inner_html,
    parse_document,
    select_class,
    serialize,
)

logger = logging.getLogger(__name__)

LOCAL_MATHJAX = "MathJax.js"
IMAGE_CLICK_HANDLER = "img.performClick(title);"


def select_stylesheet(theme: ThemeSettings) -> str:
    """Pick the stylesheet for the active theme.

    Amoled wins over night; invert only applies to the dark themes.

    Examples:
        >>> select_stylesheet(ThemeSettings(amoled=True, night=True, invert=True))
        'amoled_invert.css'
        >>> select_stylesheet(ThemeSettings(invert=True))
        'style.css'
    """
    if theme.amoled:
        return "amoled_invert.css" if theme.invert else "amoled.css"
    if theme.night:
        return "night_invert.css" if theme.invert else "night.css"
    return "style.css"


def ref_click_handler(index: int) -> str:
    return f'ref.performClick("{index}")'


class DocumentTransformer:
    """Transform fetched article pages into their renderable form.

    The transformer does no I/O: it only needs the asset cache to compute
    where offline images live.

    Example:
        transformer = DocumentTransformer(AssetCache(Path("~/whatif")))
        loaded = transformer.transform(157, article, page, offline_mode=False,
                                       theme=ThemeSettings(night=True))
    """

    def __init__(
        self,
        asset_cache: AssetCache,
        base_url: str = DEFAULT_BASE_URL,
        mathjax_url: str = DEFAULT_MATHJAX_URL,
    ):
        """Initialize the transformer.

        Args:
            asset_cache: Cache used to resolve offline image paths
            base_url: Archive host that remote image URLs are pinned to
            mathjax_url: Remote math rendering script
        """
        self.asset_cache = asset_cache
        self.base_url = base_url
        self.mathjax_url = mathjax_url

    def transform(
        self,
        number: int,
        article: Article,
        raw_document: str,
        offline_mode: bool,
        theme: ThemeSettings,
    ) -> LoadedArticle:
        """Rewrite an article page for the reader.

        Args:
            number: Article number
            article: The article record
            raw_document: Page markup, fetched or read from the cache
            offline_mode: Point assets at local copies instead of the site
            theme: Theme flags selecting the stylesheet

        Returns:
            LoadedArticle with the final markup and the extracted footnotes

        Raises:
            ParseError: If the markup cannot be parsed
        """
        doc = parse_document(raw_document)

        self._replace_stylesheets(doc, theme)
        image_count = self._rewrite_illustrations(doc, number, offline_mode)
        self._rewrite_math_script(doc, offline_mode)
        self._remove_chrome(doc)
        refs = self._extract_refs(doc)

        logger.debug(
            f"Transformed article {number}: {image_count} illustrations, "
            f"{len(refs)} footnotes, offline={offline_mode}"
        )
        return LoadedArticle(article=article, html=serialize(doc), refs=refs)

    def _replace_stylesheets(self, doc: lxml.html.HtmlElement, theme: ThemeSettings) -> None:
        head = doc.find("head")
        if head is None:
            head = lxml.html.Element("head")
            doc.insert(0, head)

        drop(
            link
            for link in head.iter("link")
            if "stylesheet" in (link.get("rel") or "").lower().split()
        )

        link = lxml.html.Element("link")
        link.set("rel", "stylesheet")
        link.set("type", "text/css")
        link.set("href", select_stylesheet(theme))
        head.append(link)

    def _rewrite_illustrations(
        self, doc: lxml.html.HtmlElement, number: int, offline_mode: bool
    ) -> int:
        """Point every illustration at its remote or cached copy.

        The n-th illustration maps to cached image n, the same numbering
        the fetcher uses when storing them.
        """
        illustrations = select_class(doc, ILLUSTRATION_CLASS)
        for index, element in enumerate(illustrations, start=1):
            if offline_mode:
                src = self.asset_cache.image_path(number, index).as_uri()
            else:
                src = canonical_url(element.get("src", ""), self.base_url)
            element.set("src", src)
            element.set("onclick", IMAGE_CLICK_HANDLER)
        return len(illustrations)

    def _rewrite_math_script(self, doc: lxml.html.HtmlElement, offline_mode: bool) -> None:
        scripts = doc.xpath("//script[@src]")
        if not scripts:
            return
        scripts[0].set("src", LOCAL_MATHJAX if offline_mode else self.mathjax_url)

    def _remove_chrome(self, doc: lxml.html.HtmlElement) -> None:
        drop(doc.xpath("//*[@id='header-wrapper' or @id='footer-wrapper']"))
        drop(doc.xpath("//nav"))
        drop(doc.xpath("//h1"))

    def _extract_refs(self, doc: lxml.html.HtmlElement) -> list[str]:
        """Move footnote bodies out of the page.

        Returns:
            Inner markup of each footnote body, indexed like the footnotes
        """
        refs: list[str] = []
        for index, ref in enumerate(select_class(doc, REF_CLASS)):
            bodies = [
                element for element in select_class(ref, REFBODY_CLASS) if element is not ref
            ]
            refs.append("\n".join(inner_html(body) for body in bodies))
            for refnum in select_class(ref, REFNUM_CLASS):
                refnum.set("onclick", ref_click_handler(index))
            drop(bodies)
        return refs
