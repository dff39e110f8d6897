"""Pytest fixtures for whatif-sync tests."""

import io

import httpx
import pytest
from PIL import Image

from schemas.settings import ReaderSettings
from whatif_sync.clients import WhatIfClient

BASE_URL = "https://what-if.xkcd.com"

ARCHIVE_PAGE = """<!DOCTYPE html>
<html>
<head><title>What If? Archive</title></head>
<body>
<div id="archive-wrapper">
  <div class="archive-entry">
    <a href="/1/"><img class="archive-image" src="/imgs/archive/balloon.jpg"></a>
    <h1 class="archive-title"><a href="/1/">Relativistic Baseball</a></h1>
  </div>
  <div class="archive-entry">
    <a href="/2/"><img class="archive-image" src="imgs/archive/sea.jpg"></a>
    <h1 class="archive-title"><a href="/2/">Glass Half Empty</a></h1>
  </div>
  <div class="archive-entry">
    <a href="/3/"><img class="archive-image" src="http://what-if.xkcd.com/imgs/archive/moon.jpg"></a>
    <h1 class="archive-title"><a href="/3/">Lunar Swimming</a></h1>
  </div>
</div>
</body>
</html>
"""

ARTICLE_PAGE = """<!DOCTYPE html>
<html>
<head>
<title>Relativistic Baseball</title>
<link rel="stylesheet" type="text/css" href="/css/style.css">
<link rel="alternate" type="application/atom+xml" href="/feed.atom">
<script type="text/javascript" src="//cdn.mathjax.org/mathjax/latest/MathJax.js?config=TeX"></script>
</head>
<body>
<div id="header-wrapper"><div id="header">What If?</div></div>
<nav class="main-nav"><a href="/2/">Next</a></nav>
<article class="entry">
<h1>Relativistic Baseball</h1>
<p id="question">What would happen if you tried to hit a baseball pitched at 90% the speed of light?</p>
<img class="illustration" title="Pitch" src="/imgs/a/1/pitch.png">
<p>The ball is going so fast<span class="ref"><span class="refnum">[1]</span><span class="refbody">Footnote <i>one</i> &amp; more.</span></span> that everything else is stationary.</p>
<img class="illustration" title="Swing" src="http://what-if.xkcd.com/imgs/a/1/swing.png">
<p>Air molecules fuse<span class="ref"><span class="refnum">[2]</span><span class="refbody">Second note.</span></span>.</p>
<img class="illustration" title="Crater" src="//what-if.xkcd.com/imgs/a/1/crater.png">
</article>
<div id="footer-wrapper"><div id="footer">Footer</div></div>
</body>
</html>
"""

ILLUSTRATION_PATHS = [
    "/imgs/a/1/pitch.png",
    "/imgs/a/1/swing.png",
    "/imgs/a/1/crater.png",
]

ARCHIVE_IMAGE_PATHS = [
    "/imgs/archive/balloon.jpg",
    "/imgs/archive/sea.jpg",
    "/imgs/archive/moon.jpg",
]


def make_image_bytes(fmt: str = "PNG", color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 3), color=color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeSite:
    """Routes requests of an httpx.MockTransport to canned responses.

    Unknown paths answer 404. A route may also be an exception, which is
    raised from the transport.
    """

    def __init__(self):
        self.routes: dict[str, object] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, content: str | bytes = b"", status: int = 200) -> None:
        self.routes[path] = (status, content)

    def fail(self, path: str, exception: type[httpx.RequestError]) -> None:
        self.routes[path] = exception

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404)
        if isinstance(route, type) and issubclass(route, Exception):
            raise route("simulated failure", request=request)
        status, content = route
        return httpx.Response(status, content=content)

    def requested_paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def client(self, **config) -> WhatIfClient:
        return WhatIfClient({
            "base_url": BASE_URL,
            "retry_attempts": 1,
            "retry_delay": 0,
            "transport": httpx.MockTransport(self.handler),
            **config,
        })


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def fake_site():
    """Empty fake archive site."""
    return FakeSite()


@pytest.fixture
def populated_site(png_bytes):
    """Fake archive site with three articles, illustrations and thumbnails."""
    site = FakeSite()
    site.add("/archive/", ARCHIVE_PAGE)
    for number in (1, 2, 3):
        site.add(f"/{number}/", ARTICLE_PAGE)
    for path in ILLUSTRATION_PATHS:
        site.add(path, png_bytes)
    for path in ARCHIVE_IMAGE_PATHS:
        site.add(path, make_image_bytes("JPEG", color="blue"))
    return site


@pytest.fixture
def settings(tmp_path):
    """Reader settings rooted in a temporary directory."""
    return ReaderSettings(offline_root=tmp_path / "offline", retry_delay=0)
