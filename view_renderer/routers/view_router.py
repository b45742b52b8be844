"""Page routes rendering templates through the view pipeline."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from view_renderer.controller import ActionRenderer
from view_renderer.dependencies import get_action_renderer
from view_renderer.views.responses import html_response

router = APIRouter()


@router.get("/pages/{page:path}", response_class=HTMLResponse)
def render_page(page: str, renderer: ActionRenderer = Depends(get_action_renderer)):
    """Render ``<page_prefix>/<page>`` inside the default layout.

    Runs in the threadpool; template execution is synchronous.
    """
    settings = renderer.settings
    name = f"{settings.page_prefix}/{page.strip('/') or 'index'}"

    # Only a missing page is a client error; a missing layout surfaces as a 500
    if not renderer.dispatcher.lookup.exists(name, formats=renderer.view.formats):
        raise HTTPException(status_code=404, detail=f"Page '{page}' not found")

    renderer.render({"template": name, "layout": settings.default_layout})
    return html_response(renderer)
