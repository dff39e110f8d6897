"""Record store of article metadata keyed by article number."""

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from schemas.article import Article

logger = logging.getLogger(__name__)

Listener = Callable[[list[Article]], None]


class DocumentStore:
    """In-memory article store with change notification.

    Listeners registered with subscribe() receive the full, number-ordered
    article list after every change.
    """

    def __init__(self, articles: Iterable[Article] = ()):
        self._articles: dict[int, Article] = {a.number: a for a in articles}
        self._listeners: list[Listener] = []

    def get(self, number: int) -> Article | None:
        article = self._articles.get(number)
        return article.model_copy() if article is not None else None

    def articles(self) -> list[Article]:
        return [self._articles[n].model_copy() for n in sorted(self._articles)]

    def count(self) -> int:
        return len(self._articles)

    def search(self, query: str) -> list[Article]:
        needle = query.casefold()
        return [a for a in self.articles() if needle in a.title.casefold()]

    def insert(self, articles: Iterable[Article]) -> list[int]:
        """Insert new articles as one batch.

        Numbers already present are left untouched.

        Returns:
            Numbers of the inserted articles
        """
        inserted: list[int] = []
        for article in articles:
            if article.number in self._articles:
                logger.debug(f"Article {article.number} already stored, skipping")
                continue
            self._articles[article.number] = article.model_copy()
            inserted.append(article.number)
        if inserted:
            self._changed()
        return inserted

    def set_favorite(self, number: int, favorite: bool) -> None:
        self._update(number, favorite=favorite)

    def set_read(self, number: int, read: bool) -> None:
        self._update(number, read=read)

    def set_all_read(self, read: bool = True) -> None:
        for article in self._articles.values():
            article.read = read
        self._changed()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, number: int, **flags: bool) -> None:
        article = self._articles.get(number)
        if article is None:
            logger.warning(f"Cannot update unknown article {number}")
            return
        for name, value in flags.items():
            setattr(article, name, value)
        self._changed()

    def _changed(self) -> None:
        self._persist()
        snapshot = self.articles()
        for listener in list(self._listeners):
            listener(snapshot)

    def _persist(self) -> None:
        pass


class JsonDocumentStore(DocumentStore):
    """Article store persisted as a JSON file.

    The whole store is rewritten after every change.
    """

    def __init__(self, path: Path):
        self.path = path
        super().__init__(self._load(path))

    @staticmethod
    def _load(path: Path) -> list[Article]:
        if not path.exists():
            return []
        data = json.loads(path.read_text())
        return [Article.model_validate(item) for item in data.get("articles", [])]

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"articles": [a.model_dump() for a in self.articles()]}
        tmp_path = self.path.with_suffix(self.path.suffix + ".part")
        tmp_path.write_text(json.dumps(payload, indent=2))
        tmp_path.replace(self.path)
        logger.debug(f"Wrote {len(payload['articles'])} articles to {self.path}")
