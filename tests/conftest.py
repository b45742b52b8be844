"""Pytest configuration and shared fixtures."""

import jinja2
import pytest

from view_renderer.config import Settings
from view_renderer.rendering.dispatcher import RenderDispatcher
from view_renderer.rendering.instrumentation import Notifier, RenderEvent
from view_renderer.templates.resolver import JinjaTemplateResolver

TEMPLATES = {
    # layouts
    "layouts/application.html.jinja": "<html>{{ yield_content('title') }}|{{ yield_content() }}</html>",
    "layouts/print.pdf.jinja": "PDF {{ yield_content() }}",
    "layouts/plain.jinja": "[{{ yield_content() }}]",
    # full templates
    "users/show.html.jinja": "{{ content_for('title', 'User') }}<p>{{ name }}</p>",
    "users/show.json.jinja": '{"name": "{{ name }}"}',
    "pages/escaped.html.jinja": "{{ payload }}",
    "pages/deferred.html.jinja": "before[{{ yield_content() }}]",
    "pages/greeting.html.jinja": "Hi {{ user }}",
    "pages/with_partial.html.jinja": "<ul>{{ render({'partial': 'users/card', 'locals': {'name': name}}) }}</ul>",
    "notes/readme.text": "<b>raw</b> {{ not_jinja }}",
    # partials
    "_x.html.jinja": "partial x {{ who }}",
    "users/_card.html.jinja": '<div class="card">{{ name }}</div>',
    "shared/_box.html.jinja": "<section>{{ yield_content() }}</section>",
    "shared/_frame.html.jinja": "<frame>{{ yield_content() }}</frame>",
    "shared/_greet.html.jinja": "<p>{{ yield_content({'name': 'David'}) }}</p>",
}


@pytest.fixture
def settings():
    """Settings with render-event logging disabled."""
    return Settings(log_render_events=False)


@pytest.fixture
def resolver():
    """Resolver over the in-memory template set."""
    return JinjaTemplateResolver(jinja2.DictLoader(TEMPLATES))


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def events(notifier):
    """Every span published by the notifier, in order."""
    received: list[RenderEvent] = []
    notifier.subscribe("action_view.*", received.append)
    return received


@pytest.fixture
def dispatcher(resolver, settings, notifier):
    """Dispatcher with the default partial renderer and no page updater."""
    return RenderDispatcher(resolver, settings, notifier=notifier)
