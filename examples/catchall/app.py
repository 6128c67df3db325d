"""Catch-all site — one entry point serving pages, layouts, and an API.

A framework's catch-all route (``/[[...path]]``) hands its captured
segments to the router, which picks the page, wraps it in the matching
layout, and answers metadata and API requests.

Run:
    cd examples/catchall && wayfinder routes app:router
    cd examples/catchall && wayfinder render app:router /admin
"""

from wayfinder import NO_CONTENT, Response, Router

router = Router()


# ---------------------------------------------------------------------------
# Layouts
# ---------------------------------------------------------------------------


@router.layout("/*")
async def site_layout(content: str, path: str) -> str:
    return f"<div><h1>Wildcard Layout</h1>{content}</div>"


# Ranks the same as /:slug/* below; registering it first keeps /admin here.
@router.layout("/admin/*")
async def admin_layout(content: str, path: str) -> str:
    return f"<div><h1>Admin Layout</h1>{content}</div>"


@router.layout("/:slug/*")
async def slug_layout(content: str, path: str) -> str:
    return f"<div><h1>Slug parameter layout</h1>{content}</div>"


@router.layout("/special")
async def special_layout(content: str, path: str) -> str:
    return f"<div><h1>Special Layout</h1>{content}</div>"


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@router.page("/", metadata=lambda params: {"title": "Test"})
async def home(params: dict[str, str]) -> str:
    return '<div>Home <a href="/admin">Admin</a> <a href="/special">Special Page</a></div>'


@router.page("/admin")
async def admin(params: dict[str, str]) -> str:
    return "<div>Admin page</div>"


@router.page("/special")
async def special(params: dict[str, str]) -> str:
    return "<div>Special page</div>"


async def _slug_metadata(params: dict[str, str]) -> dict[str, str]:
    return {"title": params["slug"].replace("-", " ").title()}


@router.page("/:slug", metadata=_slug_metadata)
async def slug(params: dict[str, str]) -> str:
    return f"<div>{params['slug']}</div>"


@router.page("/:slug/nested")
async def nested(params: dict[str, str]) -> str:
    return f"<div>{params['slug']} Nested</div>"


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


@router.api("/billing/webhook", method="POST")
async def billing_webhook(params: dict[str, str], request: object) -> Response:
    return Response("hello")


@router.api("/health")
def health(params: dict[str, str]) -> object:
    return NO_CONTENT


router.freeze()
