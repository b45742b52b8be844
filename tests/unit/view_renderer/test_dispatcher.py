"""Unit tests for the render dispatcher."""

import asyncio
from unittest.mock import MagicMock, call, patch

import pytest
from markupsafe import Markup

from view_renderer.exceptions import MissingTemplate, PageUpdateUnavailable, TemplateHandlerNotFound
from view_renderer.models.render_request import PartialRequest, TemplateRequest
from view_renderer.rendering.dispatcher import RenderDispatcher
from view_renderer.templates.handlers import TextTemplate


class TestTextAndInline:
    """Tests for text and inline requests."""

    def test_text_is_returned_verbatim(self, dispatcher):
        """Test text is not processed by any template handler."""
        assert dispatcher.render({"text": "<b>hi</b> {{ x }}"}) == "<b>hi</b> {{ x }}"

    def test_text_none_renders_single_space(self, dispatcher):
        """Test a text key without a value renders one space."""
        assert dispatcher.render({"text": None}) == " "

    def test_nothing_renders_single_space(self, dispatcher):
        """Test nothing=True is an empty text body."""
        assert dispatcher.render({"nothing": True}) == " "

    def test_inline_renders_with_locals(self, dispatcher):
        """Test inline source is compiled with the default handler."""
        assert dispatcher.render({"inline": "Hi {{ name }}", "locals": {"name": "Bo"}}) == "Hi Bo"

    def test_inline_with_text_type(self, dispatcher):
        """Test the type option selects the handler."""
        assert dispatcher.render({"inline": "{{ raw }}", "type": "text"}) == "{{ raw }}"

    def test_inline_unknown_type(self, dispatcher):
        """Test an unregistered inline type fails."""
        with pytest.raises(TemplateHandlerNotFound):
            dispatcher.render({"inline": "<%= 1 %>", "type": "erb"})

    def test_inline_inside_layout(self, dispatcher):
        """Test inline templates can be wrapped in a layout."""
        result = dispatcher.render({"inline": "body", "layout": "layouts/application"})

        assert result == "<html>|body</html>"


class TestTemplateRendering:
    """Tests for named templates, files and explicit templates."""

    def test_template_without_layout(self, dispatcher):
        """Test a template renders on its own when no layout is given."""
        assert dispatcher.render({"template": "users/show", "locals": {"name": "Ann"}}) == "<p>Ann</p>"

    def test_template_with_layout(self, dispatcher):
        """Test the layout receives default and named slot content."""
        result = dispatcher.render(
            {"template": "users/show", "locals": {"name": "Ann"}, "layout": "layouts/application"}
        )

        assert result == "<html>User|<p>Ann</p></html>"

    def test_template_with_prefix(self, dispatcher):
        """Test _prefix scopes a bare template name."""
        assert dispatcher.render({"template": "show", "_prefix": "users", "locals": {"name": "Ann"}}) == "<p>Ann</p>"

    def test_file_request(self, dispatcher):
        """Test file paths resolve through the same lookup."""
        assert dispatcher.render({"file": "users/show", "locals": {"name": "Fi"}}) == "<p>Fi</p>"

    def test_action_with_path_is_a_template(self, dispatcher):
        """Test an action containing a slash renders as a template."""
        assert dispatcher.render({"action": "users/show", "locals": {"name": "Ann"}}) == "<p>Ann</p>"

    def test_explicit_template(self, dispatcher, resolver):
        """Test a resolved Template is rendered as given."""
        card = resolver.find("users/_card", formats=("html",)).template

        assert dispatcher.render({"_template": card, "locals": {"name": "Z"}}) == '<div class="card">Z</div>'

    def test_structured_request(self, dispatcher):
        """Test RenderRequest instances are accepted directly."""
        request = TemplateRequest(name="users/show", locals={"name": "Kim"}, layout="layouts/plain")

        assert dispatcher.render(request) == "[<p>Kim</p>]"

    def test_no_template_renders_nothing(self, dispatcher):
        """Test a request naming no template produces no output."""
        assert dispatcher.render({}) is None
        assert dispatcher.render({"locals": {"a": 1}, "unknown": "ignored"}) is None

    def test_missing_template(self, dispatcher):
        """Test a missing template raises MissingTemplate."""
        with pytest.raises(MissingTemplate) as exc_info:
            dispatcher.render({"template": "missing"})

        assert exc_info.value.name == "missing"
        assert "missing.html.jinja" in exc_info.value.searched

    def test_missing_layout_tries_strict_then_relaxed(self, dispatcher, resolver):
        """Test a missing layout is only reported after both lookups miss."""
        with patch.object(resolver, "find", wraps=resolver.find) as spy:
            with pytest.raises(MissingTemplate) as exc_info:
                dispatcher.render({"template": "users/show", "locals": {"name": "A"}, "layout": "layouts/missing"})

        assert spy.call_args_list[-2:] == [
            call("layouts/missing", None, ("html",)),
            call("layouts/missing", None, None),
        ]
        assert exc_info.value.name == "layouts/missing"

    def test_layout_for_other_format_is_skipped(self, dispatcher):
        """Test a layout existing only in another format is not applied."""
        result = dispatcher.render({"template": "users/show", "locals": {"name": "Ann"}, "layout": "layouts/print"})

        assert result == "<p>Ann</p>"

    def test_formats_select_template(self, dispatcher):
        """Test the view's formats choose among template variants."""
        view = dispatcher.new_context(formats=["json"])

        assert dispatcher.render({"template": "users/show", "locals": {"name": "J"}}, view=view) == '{"name": "J"}'

    def test_layout_identifier_recorded(self, dispatcher):
        """Test the view records the applied layout."""
        view = dispatcher.new_context()
        dispatcher.render({"template": "users/show", "locals": {"name": "A"}, "layout": "layouts/plain"}, view=view)

        assert view.layout == "layouts/plain.jinja"


class TestEscaping:
    """Tests for safe-content handling across template and layout."""

    def test_unsafe_local_escaped_once(self, dispatcher):
        """Test content escaped by the template is not escaped again by the layout."""
        result = dispatcher.render(
            {"template": "pages/escaped", "locals": {"payload": "<x>"}, "layout": "layouts/application"}
        )

        assert result == "<html>|&lt;x&gt;</html>"

    def test_safe_local_not_escaped(self, dispatcher):
        """Test Markup values pass through untouched."""
        assert dispatcher.render({"template": "pages/escaped", "locals": {"payload": Markup("<b>ok</b>")}}) == (
            "<b>ok</b>"
        )

    def test_nested_render_output_not_escaped(self, dispatcher):
        """Test a partial rendered from a template is inserted as markup."""
        result = dispatcher.render({"template": "pages/with_partial", "locals": {"name": "Q"}})

        assert result == '<ul><div class="card">Q</div></ul>'

    def test_nested_render_of_nothing_is_empty(self, dispatcher):
        """Test a nested render naming no template inserts nothing."""
        assert dispatcher.render({"inline": "[{{ render({'locals': {}}) }}]"}) == "[]"


class TestYield:
    """Tests for default-slot yield semantics."""

    def test_first_yield_before_capture_is_empty(self, dispatcher):
        """Test yielding the default slot before anything was captured returns empty."""
        assert dispatcher.render({"template": "pages/deferred"}) == "before[]"

    def test_yield_sees_previous_capture_in_same_view(self, dispatcher):
        """Test the default slot holds the previous render's output."""
        view = dispatcher.new_context()
        first = dispatcher.render({"template": "pages/deferred"}, view=view)
        second = dispatcher.render({"template": "pages/deferred"}, view=view)

        assert first == "before[]"
        assert second == "before[before[]]"

    def test_fresh_context_per_top_level_render(self, dispatcher):
        """Test top-level renders never share slots."""
        dispatcher.render({"template": "pages/deferred"})

        assert dispatcher.render({"template": "pages/deferred"}) == "before[]"


class TestPartials:
    """Tests for partial dispatch."""

    def test_partial_collaborator_called(self, resolver, settings):
        """Test partial requests go to the partial renderer untouched."""
        partial_renderer = MagicMock()
        partial_renderer.render_partial.return_value = "P"
        dispatcher = RenderDispatcher(resolver, settings, partial_renderer=partial_renderer)

        result = dispatcher.render({"partial": "_x", "locals": {"a": 1}})

        assert result == "P"
        partial_renderer.render_partial.assert_called_once()
        args = partial_renderer.render_partial.call_args
        assert args.args[1] == "_x"
        assert args.args[2] == {"a": 1}

    def test_positional_locals_reach_partial_collaborator(self, resolver, settings):
        """Test locals passed beside an options mapping are not dropped."""
        partial_renderer = MagicMock()
        dispatcher = RenderDispatcher(resolver, settings, partial_renderer=partial_renderer)

        dispatcher.render({"partial": "_x"}, {"a": 1})

        args = partial_renderer.render_partial.call_args
        assert args.args[1] == "_x"
        assert args.args[2] == {"a": 1}

    def test_option_locals_win_over_positional(self, dispatcher):
        assert dispatcher.render({"partial": "_x", "locals": {"who": "opt"}}, {"who": "pos"}) == "partial x opt"

    def test_positional_locals_with_template(self, dispatcher):
        assert dispatcher.render({"template": "users/show"}, {"name": "Pos"}) == "<p>Pos</p>"

    def test_bare_target_is_partial(self, dispatcher):
        """Test a bare value renders as a partial with the second argument as locals."""
        assert dispatcher.render("_x", {"who": "me"}) == "partial x me"

    def test_bare_name_gets_underscore(self, dispatcher):
        """Test partial names resolve to underscored files."""
        assert dispatcher.render("users/card", {"name": "C"}) == '<div class="card">C</div>'

    def test_structured_partial_request(self, dispatcher):
        """Test PartialRequest instances are accepted directly."""
        assert dispatcher.render(PartialRequest(target="_x", locals={"who": "you"})) == "partial x you"

    def test_partial_with_layout(self, dispatcher):
        """Test a partial can be wrapped in a layout partial."""
        result = dispatcher.render({"partial": "users/card", "layout": "shared/frame", "locals": {"name": "N"}})

        assert result == '<frame><div class="card">N</div></frame>'

    def test_missing_partial(self, dispatcher):
        """Test a missing partial raises MissingTemplate."""
        with pytest.raises(MissingTemplate):
            dispatcher.render("users/nothing")

    def test_explicit_template_as_partial_target(self, dispatcher):
        """Test a Template object given as target is rendered directly."""
        assert dispatcher.render(TextTemplate("plain")) == "plain"


class TestBlockLayout:
    """Tests for wrapping a block in a layout."""

    def test_block_wrapped_once(self, dispatcher):
        """Test the block output appears where the layout yields."""
        result = dispatcher.render({"layout": "shared/box"}, block=lambda: "<i>inner</i>")

        assert result == "<section><i>inner</i></section>"

    def test_block_output_appended_to_buffer(self, dispatcher):
        """Test the wrapped output is appended to the view's output buffer."""
        view = dispatcher.new_context()
        view.safe_concat("start:")
        result = dispatcher.render({"layout": "shared/box"}, block=lambda: "x", view=view)

        assert result == "<section>x</section>"
        assert view.output_buffer == "start:<section>x</section>"

    def test_block_receives_yield_arguments(self, dispatcher):
        """Test arguments passed to the yield call reach the block."""
        result = dispatcher.render({"layout": "shared/greet"}, block=lambda person: f"Hello {person['name']}")

        assert result == "<p>Hello David</p>"

    def test_block_without_layout_renders_template(self, dispatcher):
        """Test a block without a layout does not trigger block wrapping."""
        result = dispatcher.render({"template": "users/show", "locals": {"name": "B"}}, block=lambda: "ignored")

        assert result == "<p>B</p>"


class TestUpdate:
    """Tests for legacy page updates."""

    def test_update_delegates_to_page_updater(self, resolver, settings):
        """Test update requests return the page updater's result unchanged."""
        page_updater = MagicMock()
        page_updater.update_page.return_value = "updated"
        dispatcher = RenderDispatcher(resolver, settings, page_updater=page_updater)
        block = MagicMock()

        result = dispatcher.render({"update": True, "layout": "layouts/application"}, block=block)

        assert result == "updated"
        assert page_updater.update_page.call_args.args[1] is block

    def test_update_without_page_updater(self, dispatcher):
        """Test update requests fail when nothing can serve them."""
        with pytest.raises(PageUpdateUnavailable):
            dispatcher.render({"update": True})


@pytest.mark.asyncio
async def test_concurrent_renders_are_isolated(dispatcher):
    """Test renders on different threads never see each other's slots."""
    names = [f"user-{i}" for i in range(20)]

    tasks = [
        asyncio.to_thread(
            dispatcher.render,
            {"template": "users/show", "locals": {"name": name}, "layout": "layouts/application"},
        )
        for name in names
    ]
    results = await asyncio.gather(*tasks)

    assert results == [f"<html>User|<p>{name}</p></html>" for name in names]
