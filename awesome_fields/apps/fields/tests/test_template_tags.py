"""Tests for the form builder template tags."""

from django.template import Context, Template, TemplateSyntaxError
from django.test import SimpleTestCase, TestCase, tag

from awesome_fields.apps.fields.test_utils import (
    create_machine,
    create_parts,
    input_types,
    options,
    select_ids,
)
from awesome_fields.apps.fields.tests.models import Machine


def render(source, **context):
    return Template("{% load field_tags lined_form_tags %}" + source).render(Context(context))


@tag("templatetags")
class FormForTagTests(SimpleTestCase):
    def setUp(self):
        self.machine = Machine(name="Xenon", notes="Sexy voice")

    def test_form_for(self):
        html = render(
            '{% form_for "machine" machine as f action="/save/" %}'
            '{% field f "name" %}{% submit_button f "save" %}'
            "{% endform_for %}",
            machine=self.machine,
        )
        self.assertHTMLEqual(
            html,
            '<form action="/save/" method="post">'
            '<input type="text" name="machine-name" value="Xenon" id="id_machine-name">'
            '<input type="submit" name="commit" value="Save">'
            "</form>",
        )

    def test_form_for_includes_csrf_token_from_context(self):
        html = render(
            '{% form_for "machine" machine as f %}{% endform_for %}',
            machine=self.machine,
            csrf_token="tok",
        )
        self.assertIn('name="csrfmiddlewaretoken" value="tok"', html)

    def test_form_for_skips_placeholder_csrf_token(self):
        html = render(
            '{% form_for "machine" machine as f %}{% endform_for %}',
            machine=self.machine,
            csrf_token="NOTPROVIDED",
        )
        self.assertNotIn("csrfmiddlewaretoken", html)

    def test_builder_by_dotted_path(self):
        html = render(
            '{% fields_for "machine" machine as f builder="awesome_fields.apps.fields.builders.LinedBuilder" %}'
            '{% field f "name" %}'
            "{% endfields_for %}",
            machine=self.machine,
        )
        self.assertIn('<div class="form_line">', html)

    def test_fields_for(self):
        html = render(
            '{% fields_for "machine" machine as f %}{% field f "notes" long=True %}{% endfields_for %}',
            machine=self.machine,
        )
        self.assertNotIn("<form", html)
        self.assertIn("<textarea", html)
        self.assertIn("Sexy voice", html)

    def test_builder_variable_is_scoped_to_block(self):
        html = render(
            '{% fields_for "machine" machine as f %}{% endfields_for %}[{{ f }}]',
            machine=self.machine,
        )
        self.assertEqual(html, "[]")

    def test_string_and_time_field_tags(self):
        html = render(
            '{% fields_for "machine" machine as f %}'
            '{% string_field f "name" %}{% time_field f "opens_at" %}'
            "{% endfields_for %}",
            machine=self.machine,
        )
        self.assertEqual(input_types(html), ["text"])
        self.assertEqual(select_ids(html), ["id_machine-opens_at_hour", "id_machine-opens_at_minute"])


@tag("templatetags")
class LinedFormForTagTests(SimpleTestCase):
    def test_lined_form_for(self):
        html = render(
            '{% lined_form_for "machine" machine as f errors=errors %}'
            '{% field f "name" label="Title" %}{% submit_button f %}'
            "{% endlined_form_for %}",
            machine=Machine(name=""),
            errors={"name": ["is required"]},
        )
        self.assertTrue(html.startswith("<form"))
        self.assertIn('<div class="form_line_with_errors">', html)
        self.assertIn('<div class="field_error">Title is required.</div>', html)
        self.assertIn('<label for="id_machine-name">Title:</label>', html)
        self.assertIn('<div class="form_buttons">', html)

    def test_lined_form_for_ignores_builder_argument(self):
        html = render(
            '{% lined_form_for "machine" machine as f builder="awesome_fields.apps.fields.builders.FormBuilder" %}'
            '{% field f "name" %}'
            "{% endlined_form_for %}",
            machine=Machine(name="Xenon"),
        )
        self.assertIn('<div class="form_line">', html)

    def test_lined_fields_for(self):
        html = render(
            '{% lined_fields_for "machine" machine as f %}{% field f "name" %}{% endlined_fields_for %}',
            machine=Machine(name="Xenon"),
        )
        self.assertNotIn("<form", html)
        self.assertIn('<label for="id_machine-name">Name:</label>', html)


@tag("templatetags")
class CollectionFieldTagTests(TestCase):
    def test_collection_field_with_collection(self):
        parts = create_parts(3)
        machine = create_machine()
        html = render(
            '{% fields_for "machine" machine as f %}'
            '{% collection_field f "parts" collection=parts %}'
            "{% endfields_for %}",
            machine=machine,
            parts=parts[:2],
        )
        self.assertIn("multiple", html)
        self.assertEqual([o.text for o in options(html)], ["Part P0", "Part P1"])


@tag("templatetags")
class TagSyntaxTests(SimpleTestCase):
    def test_missing_as_raises(self):
        with self.assertRaises(TemplateSyntaxError):
            render('{% form_for "machine" machine f %}{% endform_for %}')

    def test_positional_extra_argument_raises(self):
        with self.assertRaises(TemplateSyntaxError):
            render('{% lined_form_for "machine" machine as f "/save/" %}{% endlined_form_for %}')

    def test_missing_end_tag_raises(self):
        with self.assertRaises(TemplateSyntaxError):
            render('{% fields_for "machine" machine as f %}')
