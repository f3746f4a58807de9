"""
Unit Tests for Template Resolver
================================

Markup rendering in both asset modes and the missing-asset policies.
"""

import base64

import pytest

from pdf_harness.core.errors import AssetNotFound
from pdf_harness.core.rendering.template_resolver import (
    RASTER_ASSETS,
    TEMPLATE_ASSETS,
    AssetPolicy,
    TemplateResolver,
)
from pdf_harness.models.schemas import RenderRequest


class TestAssetLoading:

    def test_load_existing_asset(self, resolver: TemplateResolver):
        asset = resolver.load_asset("test-image-png.png")

        assert asset is not None
        assert asset.mime_type == "image/png"
        assert asset.data.startswith(b"\x89PNG")
        assert not asset.is_vector

    def test_svg_asset_is_vector(self, resolver: TemplateResolver):
        asset = resolver.load_asset("test-svg-logo.svg")

        assert asset is not None
        assert asset.is_vector
        assert asset.mime_type == "image/svg+xml"

    def test_missing_asset_is_none(self, bare_resolver: TemplateResolver):
        assert bare_resolver.load_asset("test-image-jpg.jpg") is None

    def test_data_uri_round_trips_bytes(self, resolver: TemplateResolver):
        asset = resolver.load_asset("test-image-jpg.jpg")
        prefix = "data:image/jpeg;base64,"

        uri = asset.data_uri()

        assert uri.startswith(prefix)
        assert base64.b64decode(uri[len(prefix):]) == asset.data

    def test_fail_policy_raises(self, bare_resolver: TemplateResolver):
        with pytest.raises(AssetNotFound) as exc_info:
            bare_resolver.resolve_asset("test-image-png.png", AssetPolicy.FAIL)

        assert exc_info.value.name == "test-image-png.png"
        assert "not found" in str(exc_info.value)

    @pytest.mark.parametrize("policy", [AssetPolicy.SKIP, AssetPolicy.MARK])
    def test_lenient_policies_return_none(self, bare_resolver: TemplateResolver, policy):
        assert bare_resolver.resolve_asset("test-image-png.png", policy) is None

    def test_packaged_assets_are_complete(self, resolver: TemplateResolver):
        for name in list(TEMPLATE_ASSETS.values()) + list(RASTER_ASSETS):
            assert resolver.load_asset(name) is not None, name


class TestEmbeddedMarkup:

    def test_fields_substituted(self, resolver: TemplateResolver, render_request: RenderRequest):
        markup = resolver.render_embedded(render_request)

        assert "Test Patient" in markup
        assert "Test Medication 100mg" in markup
        assert "01/01/1990" in markup
        assert "{{" not in markup

    def test_assets_inlined(self, resolver: TemplateResolver, render_request: RenderRequest):
        markup = resolver.render_embedded(render_request)

        assert "data:image/svg+xml;base64," in markup
        assert "data:image/png;base64," in markup
        assert "data:image/jpeg;base64," in markup

    def test_user_text_is_escaped(self, resolver: TemplateResolver):
        markup = resolver.render_embedded(RenderRequest(patientName="<script>alert(1)</script>"))

        assert "<script>" not in markup
        assert "&lt;script&gt;" in markup

    def test_missing_assets_skipped(self, bare_resolver: TemplateResolver):
        markup = bare_resolver.render_embedded(RenderRequest())

        assert "data:image" not in markup
        assert "<img" not in markup
        assert "Prescription Document" in markup

    def test_fail_policy_propagates(self, bare_resolver: TemplateResolver):
        with pytest.raises(AssetNotFound):
            bare_resolver.render_embedded(RenderRequest(), AssetPolicy.FAIL)


class TestBaseUrlMarkup:

    def test_base_href_points_at_asset_directory(
        self, resolver: TemplateResolver, render_request: RenderRequest
    ):
        markup = resolver.render_base_url(render_request)

        assert f'<base href="{resolver.base_href}">' in markup
        assert resolver.base_href.startswith("file://")
        assert resolver.base_href.endswith("/")

    def test_assets_referenced_by_relative_path(
        self, resolver: TemplateResolver, render_request: RenderRequest
    ):
        markup = resolver.render_base_url(render_request)

        assert 'src="test-image-png.png"' in markup
        assert 'src="test-svg-svg.svg"' in markup
        assert "data:image" not in markup

    def test_missing_assets_not_referenced(self, bare_resolver: TemplateResolver):
        markup = bare_resolver.render_base_url(RenderRequest())

        assert "test-image-png.png" not in markup
        assert "Patient Information" in markup
