"""Article schemas."""

from pydantic import BaseModel, Field


class Article(BaseModel):
    """An entry of the What If? archive.

    Attributes:
        number: 1-based position in the archive (publish order)
        title: Article title as shown on the archive page
        thumbnail: Absolute URL of the archive thumbnail
        favorite: Whether the reader marked the article as favorite
        read: Whether the reader has opened the article
    """

    number: int = Field(ge=0)
    title: str
    thumbnail: str = ""
    favorite: bool = False
    read: bool = False


class LoadedArticle(BaseModel):
    """An article prepared for rendering.

    Built fresh on every read since theme and offline state may change
    between reads.

    Attributes:
        article: The article record
        html: Fully transformed document markup
        refs: Footnote bodies, indexed in document order
    """

    article: Article
    html: str
    refs: list[str] = []

    @property
    def number(self) -> int:
        return self.article.number

    @property
    def title(self) -> str:
        return self.article.title

    @property
    def favorite(self) -> bool:
        return self.article.favorite

    @classmethod
    def none(cls) -> "LoadedArticle":
        """Placeholder shown before any article is loaded."""
        return cls(article=Article(number=0, title=""), html="", refs=[])
